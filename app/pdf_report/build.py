from datetime import datetime, timezone
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.colors import red, green, orange, black

STATUS_COLORS = {"Blacklisted": red, "Needs Review": orange, "Safe": green}

def fmt_time(ms) -> str:
    if not ms:
        return "N/A"
    dt = datetime.fromtimestamp(ms/1000, tz=timezone.utc)
    hour = dt.strftime("%I").lstrip("0") or "0"      # 03 -> 3
    minute = dt.strftime("%M")                       # 05
    ampm = dt.strftime("%p").lower()                 # am/pm
    return f"{dt.strftime('%Y-%m-%d')}, {hour}:{minute} {ampm}"

def fmt_amount(v, places=2) -> str:
    # thousands separator, no scientific notation
    if v is None:
        return "N/A"
    return f"{v:,.{places}f}"

def _line(c, y, step=16):
    """Move the cursor down, starting a new page when needed."""
    if y < 80:
        c.showPage()
        c.setFont("Helvetica", 12)
        return A4[1] - 60
    return y - step

def build_pdf(summary: dict, out_path: str):
    c = canvas.Canvas(out_path, pagesize=A4)
    w, h = A4

    # Header
    c.setFont("Helvetica-Bold", 18)
    c.drawString(40, h-60, "TRON Wallet Risk Report")

    c.setFont("Helvetica", 12)
    y = h-90
    c.drawString(40, y, f"Address: {summary.get('address', '')}"); y = _line(c, y, 15)
    c.drawString(40, y, f"Network: {summary.get('network', 'TRON')}"); y = _line(c, y, 15)

    risk = summary.get("risk") or {}
    score = int(risk.get("score") or 0)
    status = summary.get("status", "N/A")
    c.drawString(40, y, f"Risk Score: {score} / 100"); y = _line(c, y, 15)
    c.setFillColor(STATUS_COLORS.get(status, black))
    c.rect(40, y-2, width=max(0, min(100, score)) * 4, height=12, fill=1, stroke=0)
    c.setFillColor(black); y = _line(c, y, 20)
    c.drawString(40, y, f"Status: {status}"); y = _line(c, y, 15)
    c.drawString(40, y, f"USDT contract blacklist: {'YES' if summary.get('blacklisted') else 'no'}")
    y = _line(c, y, 24)

    # Reasons
    c.setFont("Helvetica-Bold", 12); c.drawString(40, y, "Reasons"); y = _line(c, y, 18)
    c.setFont("Helvetica", 11)
    for r in risk.get("reasons", []):
        c.drawString(50, y, f"- {r}"[:110]); y = _line(c, y, 16)
    y = _line(c, y, 10)

    # Balances
    c.setFont("Helvetica-Bold", 12); c.drawString(40, y, "Balances"); y = _line(c, y, 18)
    c.setFont("Helvetica", 11)
    tokens = summary.get("tokens") or []
    if not tokens:
        c.drawString(50, y, "- not available"); y = _line(c, y, 16)
    for t in tokens:
        usd = t.get("usd_value")
        usd_txt = f"  (${fmt_amount(usd)})" if usd is not None else ""
        c.drawString(50, y, f"- {t.get('symbol')}: {fmt_amount(t.get('formatted_amount'), 6)}{usd_txt}")
        y = _line(c, y, 16)
    totals = summary.get("totals") or {}
    c.drawString(50, y, f"Total USD (USDT only, approx): {fmt_amount(totals.get('usd'))}"); y = _line(c, y, 24)

    meta = summary.get("meta") or {}
    c.drawString(40, y, f"Created: {fmt_time(meta.get('created_at'))}"); y = _line(c, y, 15)
    c.drawString(40, y, f"Last activity: {fmt_time(meta.get('latest_activity'))}"); y = _line(c, y, 15)
    tx_count = meta.get("tx_count")
    c.drawString(40, y, f"Transactions: {tx_count if tx_count is not None else 'N/A'}"); y = _line(c, y, 24)

    # Recent transfers
    txs = (summary.get("transactions") or {}).get("recent") or []
    c.setFont("Helvetica-Bold", 12); c.drawString(40, y, "Recent USDT transfers"); y = _line(c, y, 18)
    c.setFont("Helvetica", 10)
    for tx in txs:
        line = f"{fmt_time(tx.get('timestamp'))}  {tx.get('direction', ''):>5}  {fmt_amount(tx.get('amount'))} {tx.get('token_symbol', '')}  {tx.get('tx_hash', '')[:16]}"
        c.drawString(50, y, line[:120]); y = _line(c, y, 14)

    degraded = meta.get("degraded") or []
    if degraded:
        y = _line(c, y, 10)
        c.setFont("Helvetica-Oblique", 9)
        c.drawString(40, y, f"Partial data, unavailable: {', '.join(degraded)}")

    c.showPage()
    c.save()
