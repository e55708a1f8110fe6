"""Built-in block explorer endpoints."""

from ...config import ChainConfig

ETHERSCAN_V2_API_URL = "https://api.etherscan.io/v2/api"

# Chain ids of local development nodes, which no explorer indexes
LOCAL_CHAIN_IDS = {31337, 1337}

_EXPLORERS = [
    ("mainnet", 1, "https://etherscan.io"),
    ("sepolia", 11155111, "https://sepolia.etherscan.io"),
    ("holesky", 17000, "https://holesky.etherscan.io"),
    ("bsc", 56, "https://bscscan.com"),
    ("bscTestnet", 97, "https://testnet.bscscan.com"),
    ("polygon", 137, "https://polygonscan.com"),
    ("polygonAmoy", 80002, "https://amoy.polygonscan.com"),
    ("optimisticEthereum", 10, "https://optimistic.etherscan.io"),
    ("optimisticSepolia", 11155420, "https://sepolia-optimism.etherscan.io"),
    ("arbitrumOne", 42161, "https://arbiscan.io"),
    ("arbitrumNova", 42170, "https://nova.arbiscan.io"),
    ("arbitrumSepolia", 421614, "https://sepolia.arbiscan.io"),
    ("avalanche", 43114, "https://snowscan.xyz"),
    ("base", 8453, "https://basescan.org"),
    ("baseSepolia", 84532, "https://sepolia.basescan.org"),
    ("gnosis", 100, "https://gnosisscan.io"),
    ("linea", 59144, "https://lineascan.build"),
    ("scroll", 534352, "https://scrollscan.com"),
    ("blast", 81457, "https://blastscan.io"),
    ("celo", 42220, "https://celoscan.io"),
    ("moonbeam", 1284, "https://moonbeam.moonscan.io"),
    ("mantle", 5000, "https://mantlescan.xyz"),
    ("fraxtal", 252, "https://fraxscan.com"),
]

BUILTIN_CHAINS = [
    ChainConfig(
        network=network,
        chainId=chain_id,
        urls={"apiURL": f"{ETHERSCAN_V2_API_URL}?chainid={chain_id}", "browserURL": browser_url},
    )
    for network, chain_id, browser_url in _EXPLORERS
]
