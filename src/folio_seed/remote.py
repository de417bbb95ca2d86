"""JSON-RPC client that mirrors seeded accounts onto a running validator.

Local validators with cheat-code RPCs (``surfnet_setAccount`` and friends)
accept whole accounts the same way the simulated ledger does, so a snapshot
seeded in-process can be replayed against a real program deployment.
"""

from __future__ import annotations

import asyncio
import base64
import itertools
import logging
from typing import Any, Optional

import aiohttp
from solders.pubkey import Pubkey

from .config import SeederConfig
from .errors import ErrorCode, SeedError
from .ledger import Account, SimulatedLedger

logger = logging.getLogger(__name__)


class RemoteLedger:
    """HTTP JSON-RPC client for a single validator endpoint."""

    def __init__(self, config: Optional[SeederConfig] = None):
        self.config = config or SeederConfig()
        self.session: Optional[aiohttp.ClientSession] = None
        self._ids = itertools.count(1)

    async def connect(self) -> None:
        """Initialize HTTP session."""
        timeout = aiohttp.ClientTimeout(total=self.config.rpc_timeout)
        self.session = aiohttp.ClientSession(timeout=timeout)

    async def close(self) -> None:
        """Close HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None

    async def __aenter__(self) -> "RemoteLedger":
        await self.connect()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def _call(self, method: str, params: list[Any]) -> Any:
        if self.session is None:
            raise SeedError(ErrorCode.REMOTE_ERROR, "not connected")
        body = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            async with self.session.post(self.config.rpc_endpoint, json=body) as resp:
                resp.raise_for_status()
                data = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("[%s] %s failed: %s", self.config.rpc_endpoint, method, e)
            raise SeedError(ErrorCode.REMOTE_ERROR, f"{method}: {e}") from e
        if data.get("error"):
            err = data["error"]
            raise SeedError(
                ErrorCode.REMOTE_ERROR, f"{method}: {err.get('message', err)} ({err.get('code')})"
            )
        return data.get("result")

    async def set_account(self, address: Pubkey, account: Account) -> None:
        await self._call(
            self.config.set_account_method,
            [
                str(address),
                {
                    "lamports": account.lamports,
                    "data": account.data.hex(),
                    "owner": str(account.owner),
                    "executable": account.executable,
                    "rentEpoch": account.rent_epoch,
                },
            ],
        )
        logger.debug("pushed %s (%d bytes)", address, len(account.data))

    async def get_account(self, address: Pubkey) -> Optional[Account]:
        result = await self._call("getAccountInfo", [str(address), {"encoding": "base64"}])
        value = (result or {}).get("value")
        if value is None:
            return None
        raw, encoding = value["data"]
        if encoding != "base64":
            raise SeedError(ErrorCode.REMOTE_ERROR, f"unexpected account encoding {encoding!r}")
        return Account(
            lamports=value["lamports"],
            data=base64.b64decode(raw),
            owner=Pubkey.from_string(value["owner"]),
            executable=value.get("executable", False),
            rent_epoch=value.get("rentEpoch", 0),
        )

    async def push_ledger(self, ledger: SimulatedLedger) -> int:
        """Push every account in ``ledger``; returns how many were sent."""
        count = 0
        for address, account in ledger.accounts():
            await self.set_account(address, account)
            count += 1
        logger.info("Pushed %d accounts to %s", count, self.config.rpc_endpoint)
        return count
