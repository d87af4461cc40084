from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    rpc_url: str = "http://localhost:8545"
    chain_id: int = 1  # chain the probes run against
    registry_url: str = "https://raw.githubusercontent.com/ethereum-optimism/superchain-registry/main/superchain/extra/addresses/addresses.json"
    storage_layout_base: str = "https://raw.githubusercontent.com/ethereum-optimism/optimism/develop/packages/contracts-bedrock/snapshots/storageLayout"
    http_timeout: float = 30.0
    http_rate_per_second: float = 5.0
    sort_state_diffs: bool = True
    debug: bool = False

    class Config:
        env_file = ".env"
        env_prefix = "STATEAUDIT_"


settings = Settings()
