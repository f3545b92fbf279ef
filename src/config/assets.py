"""
Built-in asset catalog.

Each entry maps a symbol key to its on-chain pair id, display name and venue
category. Categories must be one of: crypto, fx_or_commodity, equity, index.
Ids missing here are classified by range inference in core.catalog.
"""

from typing import Final, Dict, Any


ASSETS: Final[Dict[str, Dict[str, Any]]] = {
    # Equities (NY session hours)
    'aapl_usd':  {'id': 6004, 'name': 'APPLE INC.',                    'category': 'equity'},
    'amzn_usd':  {'id': 6005, 'name': 'AMAZON',                        'category': 'equity'},
    'coin_usd':  {'id': 6010, 'name': 'COINBASE',                      'category': 'equity'},
    'goog_usd':  {'id': 6003, 'name': 'ALPHABET INC.',                 'category': 'equity'},
    'gme_usd':   {'id': 6011, 'name': 'GAMESTOP CORP.',                'category': 'equity'},
    'intc_usd':  {'id': 6009, 'name': 'INTEL CORPORATION',             'category': 'equity'},
    'ko_usd':    {'id': 6059, 'name': 'COCA-COLA CO',                  'category': 'equity'},
    'mcd_usd':   {'id': 6068, 'name': "MCDONALD'S CORP",               'category': 'equity'},
    'msft_usd':  {'id': 6001, 'name': 'MICROSOFT CORP',                'category': 'equity'},
    'ibm_usd':   {'id': 6066, 'name': 'IBM',                           'category': 'equity'},
    'meta_usd':  {'id': 6006, 'name': 'META PLATFORMS INC.',           'category': 'equity'},
    'nvda_usd':  {'id': 6002, 'name': 'NVIDIA CORP',                   'category': 'equity'},
    'tsla_usd':  {'id': 6000, 'name': 'TESLA INC',                     'category': 'equity'},
    'orcl_usd':  {'id': 6038, 'name': 'ORACLE CORPORATION',            'category': 'equity'},
    'nke_usd':   {'id': 6034, 'name': 'NIKE INC',                      'category': 'equity'},

    # FX (weekdays)
    'aud_usd':   {'id': 5010, 'name': 'AUSTRALIAN DOLLAR',             'category': 'fx_or_commodity'},
    'eur_usd':   {'id': 5000, 'name': 'EURO',                          'category': 'fx_or_commodity'},
    'gbp_usd':   {'id': 5002, 'name': 'GREAT BRITAIN POUND',           'category': 'fx_or_commodity'},
    'nzd_usd':   {'id': 5013, 'name': 'NEW ZEALAND DOLLAR',            'category': 'fx_or_commodity'},
    'usd_cad':   {'id': 5011, 'name': 'CANADIAN DOLLAR',               'category': 'fx_or_commodity'},
    'usd_chf':   {'id': 5012, 'name': 'SWISS FRANC',                   'category': 'fx_or_commodity'},
    'usd_jpy':   {'id': 5001, 'name': 'JAPANESE YEN',                  'category': 'fx_or_commodity'},

    # Commodities (weekdays)
    'xag_usd':   {'id': 5501, 'name': 'SILVER',                        'category': 'fx_or_commodity'},
    'xau_usd':   {'id': 5500, 'name': 'GOLD',                          'category': 'fx_or_commodity'},
    'wti_usd':   {'id': 5503, 'name': 'WEST TEXAS INTERMEDIATE CRUDE', 'category': 'fx_or_commodity'},

    # Crypto (24/7)
    'btc_usdt':  {'id': 0,    'name': 'BITCOIN',                       'category': 'crypto'},
    'eth_usdt':  {'id': 1,    'name': 'ETHEREUM',                      'category': 'crypto'},
    'sol_usdt':  {'id': 10,   'name': 'SOLANA',                        'category': 'crypto'},
    'xrp_usdt':  {'id': 14,   'name': 'RIPPLE',                        'category': 'crypto'},
    'avax_usdt': {'id': 5,    'name': 'AVALANCHE',                     'category': 'crypto'},
    'doge_usdt': {'id': 3,    'name': 'DOGECOIN',                      'category': 'crypto'},
    'trx_usdt':  {'id': 15,   'name': 'TRON',                          'category': 'crypto'},
    'ada_usdt':  {'id': 16,   'name': 'CARDANO',                       'category': 'crypto'},
    'sui_usdt':  {'id': 90,   'name': 'SUI',                           'category': 'crypto'},
    'link_usdt': {'id': 2,    'name': 'CHAINLINK',                     'category': 'crypto'},

    # Index ETFs (weekdays, any hour)
    'spy_usd':   {'id': 6113, 'name': 'SPDR S&P 500 ETF',              'category': 'index'},
    'qqqm_usd':  {'id': 6114, 'name': 'NASDAQ-100 ETF',                'category': 'index'},
    'iwm_usd':   {'id': 6115, 'name': 'ISHARES RUSSELL 2000 ETF',      'category': 'index'},
}
