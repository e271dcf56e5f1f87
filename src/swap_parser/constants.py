from typing import Dict

from solders.pubkey import Pubkey

NATIVE_SOL_MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")
NATIVE_SOL_DECIMALS = 9
# Pumpfun mints every bonding-curve token with this precision.
PUMPFUN_TOKEN_DECIMALS = 6

TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
TOKEN_2022_PROGRAM_ID = Pubkey.from_string("TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb")
TOKEN_PROGRAM_IDS = frozenset({TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID})

# Aggregators and routers
JUPITER_PROGRAM_ID = Pubkey.from_string("JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4")
JUPITER_DCA_PROGRAM_ID = Pubkey.from_string("DCA265Vj8a9CEuX1eb1LWRnDT7uK6q1xMipnNyatn23M")
DFLOW_AGGREGATOR_V4_PROGRAM_ID = Pubkey.from_string("DF1ow4tspfHX9JwWJsAb9epbkA8hmpSEAtxXy1V27QBH")
OKX_DEX_ROUTER_PROGRAM_ID = Pubkey.from_string("6m2CDdhRgxpH4WjvdzxAYbGxwdGUz5MziiL5jek2kBma")

# Trading bot relays
BANANA_GUN_PROGRAM_ID = Pubkey.from_string("BANANAjs7FJiPQqJTGFzkZJndT9o7UmKiYYGaJz6frGu")
MINTECH_PROGRAM_ID = Pubkey.from_string("minTcHYRLVPubRK8nt6sqe2ZpWrGDLQoNLipDJCGocY")
BLOOM_PROGRAM_ID = Pubkey.from_string("b1oomGGqPKGD6errbyfbVMBuzSC8WtAAYo8MwNafWW1")
NOVA_PROGRAM_ID = Pubkey.from_string("NoVA1TmDUqksaj2hB1nayFkPysjJbFiU76dT4qPw2wm")
MAESTRO_PROGRAM_ID = Pubkey.from_string("MaestroAAe9ge5HTc64VbBQZ6fP77pwvrhM8i1XWSAx")

# Raydium
RAYDIUM_V4_PROGRAM_ID = Pubkey.from_string("675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8")
RAYDIUM_CPMM_PROGRAM_ID = Pubkey.from_string("CPMMoo8L3F4NbTegBCKVNunggL7H1ZpdTHKxQB5qKP1C")
RAYDIUM_AMM_ROUTING_PROGRAM_ID = Pubkey.from_string("routeUGWgWzqBWFcrCfv8tritsqukccJPu3q5GPP3xS")
RAYDIUM_CLMM_PROGRAM_ID = Pubkey.from_string("CAMMCzo5YL8w4VFF8KVHrK22GGUsp5VTaW7grrKgrWqK")
RAYDIUM_LAUNCHLAB_PROGRAM_ID = Pubkey.from_string("LanMV9sAd7wArD4vJFi2qDdfnVhFxYSUg6eADduJ3uj")
RAYDIUM_AP51_PROGRAM_ID = Pubkey.from_string("AP51WLiiqTdbZfgyRMs35PsZpdmLuPDdHYmrB23pEtMU")

ORCA_WHIRLPOOL_PROGRAM_ID = Pubkey.from_string("whirLbMiicVdio4qvUfM5KAg6Ct8VwpYzGff3uctyCc")

# Meteora
METEORA_DLMM_PROGRAM_ID = Pubkey.from_string("LBUZKhRxPF3XUpBCjp4YzTKgLccjZhTSDM9YuVaPwxo")
METEORA_POOLS_PROGRAM_ID = Pubkey.from_string("Eo7WjKq67rjJQSZxS6z3YkapzY3eMj6Xy8X5EQVn5UaB")
METEORA_DAMM_V2_PROGRAM_ID = Pubkey.from_string("cpamdpZCGKUy5JxQXB4dcpGPiikHawvSWAd6mEn1sGG")
METEORA_DBC_PROGRAM_ID = Pubkey.from_string("dbcij3LWUppWqq96dh6gJWwBifmcGfLSB5D4DuSMaqN")

# Pumpfun
PUMPFUN_PROGRAM_ID = Pubkey.from_string("6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P")
PUMPFUN_RELAY_PROGRAM_ID = Pubkey.from_string("BSfD6SHZigAfDWSjzD5Q41jw8LmKwtmjskPH9XW1mrRW")
PUMPFUN_AMM_PROGRAM_ID = Pubkey.from_string("pAMMBay6oceH9fJKBRHGP5D4bD4sWpmSwMn52FMfXEA")

# Programs that are only ever reconciled against post balances
PHOENIX_PROGRAM_ID = Pubkey.from_string("PhoeNiXZ8ByJGLkxNfZRnkUfjvmuYqLR89jjFHGqdXY")
ZEROFI_PROGRAM_ID = Pubkey.from_string("ZERor4xhbUycZ6gb9ntrhqscUcZmAbQDjEAtCf4hbZY")
STABLE_WEIGHTED_PROGRAM_ID = Pubkey.from_string("swapFpHZwjELNnjvThjajtiVmkz3yPQEHjLtka2fwHW")
STABBLE_STABLE_SWAP_PROGRAM_ID = Pubkey.from_string("swapNyd8XiQwJ6ianp9snpu4brUqFxadzvHebnAXjJZ")
SOLFI_PROGRAM_ID = Pubkey.from_string("SoLFiHG9TfgtdUXUjWAxi3LtvYuFyDLVhBWxdMZxyCe")
LIFINITY_V2_PROGRAM_ID = Pubkey.from_string("2wT8Yq49kHgDzXuPxZSaeLaH1qbmGXtEyPy64bL7aD3c")
ORCA_TOKEN_SWAP_V2_PROGRAM_ID = Pubkey.from_string("9W959DqEETiGZocYWCQPaJ6sBmUzgfxXfqGeTEdp3aQP")
ORCA_TOKEN_SWAP_PROGRAM_ID = Pubkey.from_string("DjVE6JNiYqPL2QXyCUUh8rNjHrbz9hXHNYt99MQ59qw1")
ONE_DEX_PROGRAM_ID = Pubkey.from_string("DEXYosS6oEGvk8uCDayvwEZz4qEyDJRf9nFgYCaqPMTm")
CROPPER_PROGRAM_ID = Pubkey.from_string("H8W3ctz92svYg6mkn1UtGfu2aQr2fnUFHM1RhScEtQDt")
INVARIANT_PROGRAM_ID = Pubkey.from_string("HyaB3W9q6XdA5xwpU4XnSZV94htfmbmqJXZcEbRaJutt")
SABER_PROGRAM_ID = Pubkey.from_string("SSwpkEEcbUqx4vtoEByFjSkhKdCT862DNVb52nZg1UZ")
SAROS_PROGRAM_ID = Pubkey.from_string("SSwapUtytfBdBn1b9NUGG6foMVPtcWgpRU32HToDUZr")
FLUXBEAM_PROGRAM_ID = Pubkey.from_string("FLUXubRmkEi2q6K3Y9kBPg9248ggaZVsoSFhtJHSrm1X")
GUAC_PROGRAM_ID = Pubkey.from_string("Gswppe6ERWKpUTXvRPfXdzHhiCyJvLadVvXGfdpBqcE1")
BONKSWAP_PROGRAM_ID = Pubkey.from_string("BSwp6bEBihVLdqJRKGgzjcGLHkcTuzmSo1TQkHepzH8p")
DEXLAB_PROGRAM_ID = Pubkey.from_string("DSwpgjMvXhtGn6BsbqmacdBZyfLj6jSWf3HJpdJtmg6N")
ALDRIN_V1_PROGRAM_ID = Pubkey.from_string("AMM55ShdkoGRB5jVYPjWziwk8m5MpwyDgsMWHaMSQWH6")
ALDRIN_V2_PROGRAM_ID = Pubkey.from_string("CURVGoZn8zycx6FXwwevgBTB2gVvdbGTEpvMJDbgs2t4")
SWAP_PROGRAM_ID = Pubkey.from_string("SwaPpA9LAaLfeLi3a68M4DjnLqgtticKg6CnyNwgAC8")
DAOFUN_PROGRAM_ID = Pubkey.from_string("5jnapfrAN47UYkLkEf7HnprPPBCQLvkYWGZDeKkaP5hv")
CREMA_PROGRAM_ID = Pubkey.from_string("CLMM9tUoggJu2wagPkkqs9eFG4BWhVBZWkP1qv3Sp7tR")
STEPN_DOOAR_PROGRAM_ID = Pubkey.from_string("Dooar9JkhdZ7J3LHN3A7YCuoGRUggXhQaG4kijfLGU2j")
HELIUM_TREASURY_PROGRAM_ID = Pubkey.from_string("treaf4wWBBty3fHdyBpo35Mz84M8k3heKXmjmi9vFt5")
PENGUIN_PROGRAM_ID = Pubkey.from_string("PSwapMdSai8tjrEXcxFeQth87xC4rRsa4VA5mhGhXkP")

PROGRAM_LABELS: Dict[Pubkey, str] = {
    JUPITER_PROGRAM_ID: "Jupiter",
    JUPITER_DCA_PROGRAM_ID: "Jupiter DCA",
    DFLOW_AGGREGATOR_V4_PROGRAM_ID: "DFlow",
    OKX_DEX_ROUTER_PROGRAM_ID: "OKX DEX Router",
    BANANA_GUN_PROGRAM_ID: "Banana Gun",
    MINTECH_PROGRAM_ID: "Mintech",
    BLOOM_PROGRAM_ID: "Bloom",
    NOVA_PROGRAM_ID: "Nova",
    MAESTRO_PROGRAM_ID: "Maestro",
    RAYDIUM_V4_PROGRAM_ID: "Raydium Liquidity Pool V4",
    RAYDIUM_CPMM_PROGRAM_ID: "Raydium CPMM",
    RAYDIUM_AMM_ROUTING_PROGRAM_ID: "Raydium AMM Routing",
    RAYDIUM_CLMM_PROGRAM_ID: "Raydium Concentrated Liquidity",
    RAYDIUM_LAUNCHLAB_PROGRAM_ID: "Raydium LaunchLab",
    RAYDIUM_AP51_PROGRAM_ID: "Raydium",
    ORCA_WHIRLPOOL_PROGRAM_ID: "Whirlpool",
    METEORA_DLMM_PROGRAM_ID: "Meteora DLMM",
    METEORA_POOLS_PROGRAM_ID: "Meteora Pools Program",
    METEORA_DAMM_V2_PROGRAM_ID: "Meteora DAMM V2",
    METEORA_DBC_PROGRAM_ID: "Meteora Dynamic Bonding Curve",
    PUMPFUN_PROGRAM_ID: "Pump.fun",
    PUMPFUN_RELAY_PROGRAM_ID: "Pump.fun",
    PUMPFUN_AMM_PROGRAM_ID: "Pump.fun AMM",
    PHOENIX_PROGRAM_ID: "Phoenix",
    ZEROFI_PROGRAM_ID: "ZeroFi",
    STABLE_WEIGHTED_PROGRAM_ID: "StableWeighted",
    STABBLE_STABLE_SWAP_PROGRAM_ID: "stabble Stable Swap",
    SOLFI_PROGRAM_ID: "SolFi",
    LIFINITY_V2_PROGRAM_ID: "Lifinity Swap V2",
    ORCA_TOKEN_SWAP_V2_PROGRAM_ID: "Orca Token Swap V2",
    ORCA_TOKEN_SWAP_PROGRAM_ID: "Orca Token Swap",
    ONE_DEX_PROGRAM_ID: "1Dex",
    CROPPER_PROGRAM_ID: "Cropper",
    INVARIANT_PROGRAM_ID: "Invariant",
    SABER_PROGRAM_ID: "Saber Stable Swap",
    SAROS_PROGRAM_ID: "Saros",
    FLUXBEAM_PROGRAM_ID: "Fluxbeam",
    GUAC_PROGRAM_ID: "Guac",
    BONKSWAP_PROGRAM_ID: "BonkSwap",
    DEXLAB_PROGRAM_ID: "DexlabSwap",
    ALDRIN_V1_PROGRAM_ID: "Aldrin",
    ALDRIN_V2_PROGRAM_ID: "Aldrin",
    SWAP_PROGRAM_ID: "Swap Program",
    DAOFUN_PROGRAM_ID: "DaoFun",
    CREMA_PROGRAM_ID: "Crema Finance Program",
    STEPN_DOOAR_PROGRAM_ID: "StepN DOOAR Swap",
    HELIUM_TREASURY_PROGRAM_ID: "Helium Treasury Management",
    PENGUIN_PROGRAM_ID: "Penguin Finance",
}


def program_label(program_id: Pubkey) -> str:
    return PROGRAM_LABELS.get(program_id, str(program_id))
