import httpx

from ..config import TRONSCAN_BASE
from ._http import request_json

PROVIDER = "tronscan"


class TronScan:
    def __init__(self, http: httpx.AsyncClient, base: str = TRONSCAN_BASE, api_key: str = ""):
        self.http = http
        self.base = base.rstrip("/")
        self.api_key = api_key

    def _headers(self) -> dict:
        h = {}
        if self.api_key:
            h["TRON-PRO-API-KEY"] = self.api_key
        return h

    async def _get(self, path: str, params: dict):
        return await request_json(self.http, PROVIDER, "GET", f"{self.base}{path}",
                                  params=params, headers=self._headers())

    async def check_account_security(self, address: str) -> dict:
        return await self._get("/api/security/account/data", {"address": address})

    async def check_stablecoin_blacklist(self, address: str) -> dict:
        params = {"blackAddress": address, "start": 0, "limit": 20, "sort": 2, "direction": 2}
        return await self._get("/api/stableCoin/blackList", params)

    async def account_info(self, address: str) -> dict:
        return await self._get("/api/accountv2", {"address": address})

