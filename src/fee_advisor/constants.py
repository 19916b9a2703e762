"""Token address constants and reference market data."""

from typing import TypedDict


class MainnetTokens(TypedDict):
    DAI: str
    USDC: str
    USDT: str
    WBTC: str
    WETH: str
    FRAX: str
    UNI: str
    AAVE: str


MAINNET_TOKENS: MainnetTokens = {
    "DAI": "0x6b175474e89094c44da98b954eedeac495271d0f",
    "USDC": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
    "USDT": "0xdac17f958d2ee523a2206206994597c13d831ec7",
    "WBTC": "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599",
    "WETH": "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",
    "FRAX": "0x853d955acef822db058eb8505911ed77f175b99e",
    "UNI": "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984",
    "AAVE": "0x7fc66500c84a76ad7e9c93437bfc5ac33e2ddae9",
}

# Reference USD prices
REFERENCE_PRICES: dict[str, str] = {
    MAINNET_TOKENS["DAI"]: "1.0",
    MAINNET_TOKENS["USDC"]: "1.0",
    MAINNET_TOKENS["USDT"]: "1.0",
    MAINNET_TOKENS["WBTC"]: "40000",
    MAINNET_TOKENS["WETH"]: "2800",
    MAINNET_TOKENS["FRAX"]: "0.99",
    MAINNET_TOKENS["UNI"]: "8.50",
    MAINNET_TOKENS["AAVE"]: "85.20",
}

# 24h volatility (%), stablecoins lowest
REFERENCE_VOLATILITY: dict[str, str] = {
    MAINNET_TOKENS["DAI"]: "0.2",
    MAINNET_TOKENS["USDC"]: "0.1",
    MAINNET_TOKENS["USDT"]: "0.15",
    MAINNET_TOKENS["FRAX"]: "0.3",
    MAINNET_TOKENS["WBTC"]: "3.5",
    MAINNET_TOKENS["WETH"]: "4.2",
    MAINNET_TOKENS["UNI"]: "8.7",
    MAINNET_TOKENS["AAVE"]: "9.3",
}

# Swap slippage (%), lower means deeper liquidity
REFERENCE_SLIPPAGE: dict[str, str] = {
    MAINNET_TOKENS["DAI"]: "0.1",
    MAINNET_TOKENS["USDC"]: "0.05",
    MAINNET_TOKENS["USDT"]: "0.08",
    MAINNET_TOKENS["WBTC"]: "0.3",
    MAINNET_TOKENS["WETH"]: "0.2",
    MAINNET_TOKENS["FRAX"]: "0.5",
    MAINNET_TOKENS["UNI"]: "1.2",
    MAINNET_TOKENS["AAVE"]: "1.8",
}

ESTIMATED_FEE_RATIO = "0.5"

DEFAULT_ENTRY_POINT = "0x5FF137D4b0FDCD49DcA30c7CF57E578a026d2789"
DEFAULT_PAYMASTER_URL = "https://paymaster-testnet.nerochain.io"
DEFAULT_COINGECKO_API_URL = "https://api.coingecko.com/api/v3"
DEFAULT_COINGECKO_PLATFORM = "ethereum"

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
