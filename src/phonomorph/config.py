"""Application configuration using pydantic-settings.

Chain defaults point at Morph Holesky and the Morphism USDT token.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Database
    # ======================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/phonomorph.db",
        description="Database connection URL",
    )
    storage_timeout: float = Field(
        default=10.0, description="Timeout in seconds for a single storage operation"
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # ======================
    # Session tokens
    # ======================
    jwt_secret: str = Field(default="", description="HMAC secret for session tokens")
    jwt_algorithm: str = Field(default="HS256", description="Session token algorithm")
    jwt_audience: str = Field(
        default="https://phonemorph.com", description="Expected session token audience"
    )
    session_ttl_days: int = Field(default=30, description="Session token lifetime in days")

    # ======================
    # Chain
    # ======================
    chain_name: str = Field(default="Morph Holesky Testnet", description="Chain display name")
    chain_id: int = Field(default=2810, description="EVM chain ID")
    chain_rpc_url: str = Field(
        default="https://rpc-quicknode-holesky.morphl2.io", description="Chain RPC URL"
    )
    explorer_url: str = Field(
        default="https://explorer-holesky.morphl2.io", description="Block explorer URL"
    )
    rpc_timeout: float = Field(default=30.0, description="Timeout in seconds for RPC calls")
    fee_currency_symbol: str = Field(default="ETH", description="Native fee currency symbol")

    # ======================
    # Token
    # ======================
    token_contract: str = Field(
        default="0x9E12AD42c4E4d2acFBADE01a96446e48e6764B98",
        description="ERC-20 token contract transferred between wallets",
    )
    token_symbol: str = Field(default="USDT", description="Token symbol")
    token_decimals: int = Field(default=18, description="Token decimals")

    # ======================
    # Transfer policy
    # ======================
    min_fee_balance: Decimal = Field(
        default=Decimal("0.001"),
        description="Minimum native balance required before a transfer is submitted",
    )
    transfer_gas_limit: int = Field(
        default=100000, description="Gas limit for a token transfer"
    )
    mnemonic_words: int = Field(
        default=12, description="Word count for newly provisioned wallets (12 or 24)"
    )

    # ======================
    # Safety Guards
    # ======================
    dry_run: bool = Field(default=True, description="Enable dry-run mode (no real transactions)")

    # ======================
    # Encryption
    # ======================
    master_key: Optional[str] = Field(
        default=None, description="Master encryption key for wallet secrets (Fernet key)"
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "dry_run": self.dry_run,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "database_url": self._redact_url(self.database_url),
            "jwt_secret": "***" if self.jwt_secret else "(not set)",
            "master_key": "***" if self.master_key else "(not set)",
            "chain": {
                "name": self.chain_name,
                "id": self.chain_id,
                "rpc": self.chain_rpc_url,
                "explorer": self.explorer_url,
                "fee_currency": self.fee_currency_symbol,
            },
            "token": {
                "contract": self.token_contract,
                "symbol": self.token_symbol,
                "decimals": self.token_decimals,
            },
            "policy": {
                "min_fee_balance": str(self.min_fee_balance),
                "transfer_gas_limit": self.transfer_gas_limit,
            },
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact sensitive parts of database URL."""
        if "://" in url and "@" in url:
            proto, rest = url.split("://", 1)
            if "@" in rest:
                creds, host = rest.rsplit("@", 1)
                if ":" in creds:
                    user, _ = creds.split(":", 1)
                    return f"{proto}://{user}:***@{host}"
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
