"""
Minimal ABI fragments for the contract views the platform services read
and the purchase functions they encode.
"""

ERC721_ABI = [
    {
        "name": "tokenURI",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "outputs": [{"name": "", "type": "string"}],
    },
]

ERC1155_ABI = [
    {
        "name": "uri",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "outputs": [{"name": "", "type": "string"}],
    },
]

OWNABLE_ABI = [
    {
        "name": "owner",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
]

TOKEN_CREATOR_ABI = [
    {
        "name": "tokenCreator",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "outputs": [{"name": "", "type": "address"}],
    },
]

# The public getter drops the split arrays of the SalePrice struct
SUPERRARE_MARKETPLACE_ABI = [
    {
        "name": "tokenSalePrices",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "originContract", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
            {"name": "currencyAddress", "type": "address"},
        ],
        "outputs": [
            {"name": "seller", "type": "address"},
            {"name": "currencyAddress", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
    },
    {
        "name": "buy",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {"name": "_originContract", "type": "address"},
            {"name": "_tokenId", "type": "uint256"},
            {"name": "_currencyAddress", "type": "address"},
            {"name": "_amount", "type": "uint256"},
        ],
        "outputs": [],
    },
]

FOUNDATION_MARKET_ABI = [
    {
        "name": "getBuyPrice",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "nftContract", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
        ],
        "outputs": [
            {"name": "seller", "type": "address"},
            {"name": "price", "type": "uint256"},
        ],
    },
    {
        "name": "buyV2",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {"name": "nftContract", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
            {"name": "maxPrice", "type": "uint256"},
            {"name": "referrer", "type": "address"},
        ],
        "outputs": [],
    },
]

ZORA_1155_ABI = ERC1155_ABI + OWNABLE_ABI + [
    {
        "name": "mintFee",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "mintWithRewards",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {"name": "minter", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
            {"name": "quantity", "type": "uint256"},
            {"name": "minterArguments", "type": "bytes"},
            {"name": "mintReferral", "type": "address"},
        ],
        "outputs": [],
    },
]

ZORA_FIXED_PRICE_STRATEGY_ABI = [
    {
        "name": "sale",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "tokenContract", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
        ],
        "outputs": [
            {
                "name": "",
                "type": "tuple",
                "components": [
                    {"name": "saleStart", "type": "uint64"},
                    {"name": "saleEnd", "type": "uint64"},
                    {"name": "maxTokensPerAddress", "type": "uint64"},
                    {"name": "pricePerToken", "type": "uint96"},
                    {"name": "fundsRecipient", "type": "address"},
                ],
            }
        ],
    },
]
