import httpx

from ..config import TRONGRID, USDT_CONTRACT
from ._http import request_json

PROVIDER = "trongrid"


class TronGrid:
    def __init__(self, http: httpx.AsyncClient, base: str = TRONGRID, api_key: str = ""):
        self.http = http
        self.base = base.rstrip("/")
        self.api_key = api_key

    def _headers(self) -> dict:
        h = {"Accept": "application/json"}
        if self.api_key:
            h["TRON-PRO-API-KEY"] = self.api_key
        return h

    async def account_overview(self, address_b58: str) -> dict:
        url = f"{self.base}/v1/accounts/{address_b58}"
        return await request_json(self.http, PROVIDER, "GET", url, headers=self._headers())

    async def account_trc20_transfers(self, address_b58: str, limit=200, contract_address=USDT_CONTRACT,
                                      only_confirmed=True, min_timestamp=None, max_timestamp=None) -> dict:
        params = {"limit": limit, "order_by": "block_timestamp,desc"}
        if contract_address: params["contract_address"] = contract_address
        if only_confirmed: params["only_confirmed"] = "true"
        if min_timestamp is not None: params["min_timestamp"] = min_timestamp
        if max_timestamp is not None: params["max_timestamp"] = max_timestamp
        url = f"{self.base}/v1/accounts/{address_b58}/transactions/trc20"
        return await request_json(self.http, PROVIDER, "GET", url, params=params, headers=self._headers())

    async def trigger_constant_contract(self, owner_b58: str, contract_b58: str,
                                        function_selector: str, parameter: str = "") -> dict:
        url = f"{self.base}/wallet/triggerconstantcontract"
        payload = {
            "owner_address": owner_b58,
            "contract_address": contract_b58,
            "function_selector": function_selector,
            "parameter": parameter,
            "visible": True,
        }
        headers = {**self._headers(), "Content-Type": "application/json"}
        return await request_json(self.http, PROVIDER, "POST", url, json=payload, headers=headers)
