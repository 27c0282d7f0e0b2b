"""Factory for creating the ledger gateway."""

import logging

from phonomorph.chain.base import LedgerGateway, SimulatedLedgerGateway
from phonomorph.chain.evm import EVMLedgerGateway
from phonomorph.config import Settings

logger = logging.getLogger(__name__)


def create_ledger_gateway(settings: Settings) -> LedgerGateway:
    """Create the gateway for the configured chain.

    DRY_RUN selects the in-memory simulated ledger.
    """
    if settings.dry_run:
        logger.warning("DRY_RUN enabled - using simulated ledger, no transactions are broadcast")
        return SimulatedLedgerGateway(token_decimals=settings.token_decimals)

    logger.info(f"Using {settings.chain_name} (chain {settings.chain_id}) at {settings.chain_rpc_url}")
    return EVMLedgerGateway(
        rpc_url=settings.chain_rpc_url,
        chain_id=settings.chain_id,
        token_decimals=settings.token_decimals,
        gas_limit=settings.transfer_gas_limit,
        timeout=settings.rpc_timeout,
    )
