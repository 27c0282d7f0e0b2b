"""Wallet API endpoints.

Every route acts on behalf of the phone number carried by the session
token; no route accepts the acting identity from the request body.
"""

from typing import Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from phonomorph.api.deps import (
    get_current_identity,
    get_transfer_orchestrator,
    get_wallet_service,
)
from phonomorph.services import TransferOrchestrator, WalletService

router = APIRouter(prefix="/wallet", tags=["Wallet"])


# Request/Response models
class AddressResponse(BaseModel):
    """Wallet address for the caller."""
    address: str


class ImportRequest(BaseModel):
    """Import either a mnemonic or a private key."""
    secret: str = Field(..., min_length=1)


class ImportMnemonicRequest(BaseModel):
    mnemonic: str = Field(..., min_length=1)


class ImportPrivateKeyRequest(BaseModel):
    private_key: str = Field(..., min_length=1)


class BalancesResponse(BaseModel):
    """Native and token balance of the caller's wallet."""
    address: str
    fee_balance: str
    fee_symbol: str
    token_balance: str
    token_symbol: str


class SendRequest(BaseModel):
    """Transfer request. Amount may be a string or a number."""
    recipient: str
    amount: Union[str, int, float]

    @field_validator("recipient")
    @classmethod
    def strip_recipient(cls, v: str) -> str:
        return v.strip()

    @field_validator("amount", mode="before")
    @classmethod
    def amount_as_text(cls, v):
        if isinstance(v, bool) or not isinstance(v, (str, int, float)):
            raise ValueError("Amount must be a number")
        return str(v)


class SendResponse(BaseModel):
    """Broadcast receipt. The transaction may still be pending."""
    transaction_hash: str
    recipient_address: str
    status: str = "pending"


@router.post("/create", response_model=AddressResponse)
async def create_wallet(
    identity: str = Depends(get_current_identity),
    wallets: WalletService = Depends(get_wallet_service),
) -> AddressResponse:
    """Provision a new custodial wallet for the caller."""
    address = await wallets.provision(identity)
    return AddressResponse(address=address)


@router.post("/import", response_model=AddressResponse)
async def import_wallet(
    request: ImportRequest,
    identity: str = Depends(get_current_identity),
    wallets: WalletService = Depends(get_wallet_service),
) -> AddressResponse:
    """Import a mnemonic or private key, detected from its shape."""
    address = await wallets.import_existing(identity, request.secret)
    return AddressResponse(address=address)


@router.post("/import/mnemonic", response_model=AddressResponse)
async def import_mnemonic(
    request: ImportMnemonicRequest,
    identity: str = Depends(get_current_identity),
    wallets: WalletService = Depends(get_wallet_service),
) -> AddressResponse:
    address = await wallets.import_mnemonic(identity, request.mnemonic)
    return AddressResponse(address=address)


@router.post("/import/private-key", response_model=AddressResponse)
async def import_private_key(
    request: ImportPrivateKeyRequest,
    identity: str = Depends(get_current_identity),
    wallets: WalletService = Depends(get_wallet_service),
) -> AddressResponse:
    address = await wallets.import_private_key(identity, request.private_key)
    return AddressResponse(address=address)


@router.get("/get", response_model=AddressResponse)
async def get_wallet(
    identity: str = Depends(get_current_identity),
    wallets: WalletService = Depends(get_wallet_service),
) -> AddressResponse:
    """Get the caller's wallet address."""
    address = await wallets.get_wallet(identity)
    return AddressResponse(address=address)


@router.get("/balances", response_model=BalancesResponse)
async def get_balances(
    identity: str = Depends(get_current_identity),
    wallets: WalletService = Depends(get_wallet_service),
) -> BalancesResponse:
    balances = await wallets.get_balances(identity)
    return BalancesResponse(
        address=balances.address,
        fee_balance=str(balances.fee_balance),
        fee_symbol=balances.fee_symbol,
        token_balance=str(balances.token_balance),
        token_symbol=balances.token_symbol,
    )


@router.post("/send", response_model=SendResponse)
async def send(
    request: SendRequest,
    identity: str = Depends(get_current_identity),
    transfers: TransferOrchestrator = Depends(get_transfer_orchestrator),
) -> SendResponse:
    """Send tokens to another user by phone number.

    Returns as soon as the transaction is broadcast.
    """
    receipt = await transfers.transfer(identity, request.recipient, request.amount)
    return SendResponse(
        transaction_hash=receipt.transaction_hash,
        recipient_address=receipt.recipient_address,
    )
