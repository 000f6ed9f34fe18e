"""
Static classification tables.

Equity sectors for NSE/BSE symbols, symbol aliases for punctuated tickers,
the closed label sets, and the ordered keyword rules for mutual fund
categories. Tables are read-only mappings; a classifier built from
different tables can be substituted without touching engine code.
"""

from types import MappingProxyType
from typing import NamedTuple

# ===== Labels =====

OTHERS = "Others"
OTHER_MF = "Other MF"
INTERNATIONAL = "International"

EQUITY_SECTORS: tuple[str, ...] = (
    "Banking",
    "IT",
    "Pharma",
    "FMCG",
    "Auto",
    "Metals",
    "Energy",
    "Realty",
    "Telecom",
    "Infrastructure",
    "Chemicals",
    "Textiles",
    "Media",
    "Financials",
    "Insurance",
    "Cement",
    "Consumer Durables",
    "Aviation",
    "Hospitality",
    INTERNATIONAL,
    OTHERS,
    # Fund ISINs held as equities
    OTHER_MF,
)

FUND_CATEGORIES: tuple[str, ...] = (
    "Large Cap",
    "Mid Cap",
    "Small Cap",
    "Flexi Cap",
    "Multi Cap",
    "ELSS",
    "Index Fund",
    "Debt",
    "Hybrid",
    "International",
    "Sectoral",
    "Liquid",
    OTHER_MF,
)

# ===== Equity sector table =====

_SECTOR_SYMBOLS: dict[str, tuple[str, ...]] = {
    "Banking": (
        "HDFCBANK", "ICICIBANK", "SBIN", "KOTAKBANK", "AXISBANK", "INDUSINDBK",
        "BANKBARODA", "PNB", "IDFCFIRSTB", "FEDERALBNK", "BANDHANBNK", "AUBANK",
        "RBLBANK", "CANBK", "UNIONBANK", "INDIANB", "IOB", "CENTRALBK", "UCOBANK",
        "BANKINDIA", "MAHABANK", "PSB", "J_KBANK", "KARURVYSYA", "TMBANK", "DCBBANK",
        "SOUTHBANK", "CUB", "EQUITASBNK", "UJJIVANSFB", "ESAFSFB",
    ),
    "IT": (
        "TCS", "INFY", "WIPRO", "HCLTECH", "TECHM", "LTIM", "PERSISTENT", "COFORGE",
        "MPHASIS", "LTTS", "MINDTREE", "BIRLASOFT", "NIITLTD", "NIIT", "HAPPSTMNDS",
        "MASTEK", "ZENSARTECH", "CYIENT", "SONATSOFTW", "TATAELXSI", "KPITTECH",
        "ECLERX", "QUICKHEAL", "NEWGEN", "TANLA", "ROUTE", "INTELLECT", "OFSS",
        "FIRSTSOUR", "DATAPATTNS",
    ),
    "Pharma": (
        "SUNPHARMA", "DRREDDY", "CIPLA", "DIVISLAB", "APOLLOHOSP", "BIOCON", "LUPIN",
        "AUROPHARMA", "TORNTPHARM", "ALKEM", "GLENMARK", "ZYDUSLIFE", "IPCALAB",
        "LAURUSLABS", "ABBOTINDIA", "PFIZER", "SANOFI", "GLAXO", "NATCOPHARMA",
        "GRANULES", "AJANTPHARM", "FORTIS", "MAXHEALTH", "MEDANTA", "RAINBOW",
        "METROPOLIS", "LALPATHLAB", "THYROCARE", "GLAND", "SOLARA",
    ),
    "FMCG": (
        "HINDUNILVR", "ITC", "NESTLEIND", "BRITANNIA", "DABUR", "MARICO", "GODREJCP",
        "COLPAL", "TATACONSUM", "VBL", "PGHH", "EMAMILTD", "MCDOWELL_N", "UBL",
        "RADICO", "GLOBUSSPR", "BIKAJI", "DMART", "TRENT", "SHOPERSTOP", "VMART",
        "ZOMATO", "DEVYANI", "JUBLFOOD", "WESTLIFE", "SAPPHIRE", "PATANJALI", "HONAUT",
    ),
    "Auto": (
        "MARUTI", "TATAMOTORS", "M_M", "BAJAJ_AUTO", "HEROMOTOCO", "EICHERMOT",
        "ASHOKLEY", "TVSMOTOR", "BHARATFORG", "MOTHERSON", "BOSCHLTD", "MRF",
        "APOLLOTYRE", "BALKRISIND", "CEAT", "EXIDEIND", "AMARAJABAT", "SONACOMS",
        "SAMVARDHAN", "SUNDRMFAST", "ESCORTS", "FORCEMOT", "OLECTRA", "JBMA",
        "ENDURANCE", "SUPRAJIT", "UNOMINDA", "SCHAEFFLER", "SKFINDIA", "TIMKEN",
    ),
    "Metals": (
        "TATASTEEL", "JSWSTEEL", "HINDALCO", "VEDL", "COALINDIA", "NMDC", "SAIL",
        "JINDALSTEL", "NATIONALUM", "HINDZINC", "APLAPOLLO", "RATNAMANI", "WELCORP",
        "TINPLATE", "MOIL", "GMRINFRA", "KIOCL", "HLEGLAS", "ORIENTCEM", "SHYAMMETL",
    ),
    "Energy": (
        "RELIANCE", "ONGC", "BPCL", "IOC", "GAIL", "NTPC", "POWERGRID", "ADANIGREEN",
        "TATAPOWER", "ADANIPOWER", "NHPC", "SJVN", "TORNTPOWER", "CESC", "JSWENERGY",
        "PETRONET", "MGL", "IGL", "GUJGASLTD", "ATGL", "AEGISCHEM", "GSPL", "HPCL",
        "OIL", "MRPL", "CHENNPETRO", "IOCL", "CASTROLIND", "GULFOILLUB",
    ),
    "Realty": (
        "DLF", "GODREJPROP", "OBEROIRLTY", "PRESTIGE", "PHOENIXLTD", "BRIGADE", "SOBHA",
        "SUNTECK", "MAHLIFE", "LODHA", "RAYMOND", "IBREALEST", "ANANTRAJ", "KOLTEPATIL",
        "ASHIANA", "ARVIND", "PURVA", "SIGACHI",
    ),
    "Telecom": (
        "BHARTIARTL", "IDEA", "TATACOMM", "INDUSTOWER", "STLTECH", "HFCL", "TEJAS",
        "GTPL", "NAZARA", "SANSERA", "RAILTEL",
    ),
    "Infrastructure": (
        "LT", "ADANIENT", "ADANIPORTS", "ULTRACEMCO", "GRASIM", "SHREECEM", "AMBUJACEM",
        "ACC", "DALBHARAT", "RAMCOCEM", "JKCEMENT", "JKPAPER", "IRCON", "RVNL", "NBCC",
        "NCC", "KEC", "KALPATPOWR", "THERMAX", "BEL", "HAL", "BHEL", "SIEMENS", "ABB",
        "CGPOWER", "CUMMINSIND", "GRINDWELL", "CARBORUNIV", "BLUESTARCO", "VOLTAS",
        "HAVELLS", "POLYCAB", "FINOLEX", "KEI", "AIAENG",
    ),
    "Chemicals": (
        "PIDILITIND", "SRF", "AARTI", "ATUL", "DEEPAKNI", "NAVINFLUOR", "FINEORG",
        "CLEAN", "FLUOROCHEM", "TATACHEM", "ALKYLAMINE", "GALAXYSURF", "VINATIORG",
        "LXCHEM", "NEOGEN", "NOCIL", "PHILIPCARB", "SUDARSCHEM", "BASF", "BALAMINES",
    ),
    "Financials": (
        "BAJFINANCE", "BAJAJFINSV", "HDFCAMC", "SBILIFE", "HDFCLIFE", "ICICIPRULI",
        "MUTHOOTFIN", "CHOLAFIN", "SHRIRAMFIN", "MANAPPURAM", "L_TFH", "M_MFIN", "IIFL",
        "POONAWALLA", "LICHSGFIN", "CANFINHOME", "HOMEFIRST", "AAVAS", "APTUS",
        "CREDITACC", "FUSION", "ANGELONE", "MOTILALOFS", "ICICIGI", "STARHEALTH",
        "NAM_INDIA", "UTIAMC", "CAMS", "BSE", "CDSL", "MCX",
    ),
    "Insurance": (
        "LICI", "BAJAJHLDNG", "NIACL", "GICRE",
    ),
    "Cement": (
        "BIRLACORPN", "JKLAKSHMI", "HEIDELBERG", "INDIACEM", "PRISMCEM", "SAGCEM",
        "STARCEM", "NCLIND", "SANGAMIND", "KESORAMIND",
    ),
    "Consumer Durables": (
        "TITAN", "CROMPTON", "WHIRLPOOL", "SYMPHONY", "VGUARD", "ORIENTELEC",
        "RAJESHEXPO", "BATAINDIA", "RELAXO", "METROBRAND", "PAGEIND", "KAJARIACER",
        "CERA", "SOMERSETHO", "AMBER", "DIXON", "KAYNES",
    ),
    "Aviation": (
        "INDIGO", "SPICEJET", "AIRINDIA", "GMRAIRPORT",
    ),
    "Hospitality": (
        "INDHOTEL", "EIHOTEL", "LEMONTREE", "CHALET", "TAJGVK", "IHLHOME",
    ),
    "Media": (
        "ZEEL", "PVRINOX", "SUNTV", "TV18BRDCST", "NETWORK18", "INOXLEISUR", "SAREGAMA",
        "TIPS", "NAVNETEDUL",
    ),
    "Textiles": (
        "TRIDENT", "PGHL", "WELSPUNIND", "VARDHMAN", "KPR", "LUXIND", "LAXMIMACH",
        "GOKEX", "HIMATSEIDE", "NITINSPINNER", "SPANDANA", "BSLLTD", "DOLLAR",
    ),
}

SECTOR_MAPPING: MappingProxyType[str, str] = MappingProxyType(
    {symbol: sector for sector, symbols in _SECTOR_SYMBOLS.items() for symbol in symbols}
)

# Exchange tickers with punctuation map to the table's underscore keys
SYMBOL_ALIASES: MappingProxyType[str, str] = MappingProxyType(
    {
        "M&M": "M_M",
        "BAJAJ-AUTO": "BAJAJ_AUTO",
        "L&TFH": "L_TFH",
        "M&MFIN": "M_MFIN",
        "MCDOWELL-N": "MCDOWELL_N",
        "J&KBANK": "J_KBANK",
        "NAM-INDIA": "NAM_INDIA",
    }
)

# Mutual fund ISINs start with this prefix
FUND_ISIN_PREFIX = "INF"
ISIN_LENGTH = 12


# ===== Mutual fund category rules =====


class FundCategoryRule(NamedTuple):
    """Label assigned when any keyword occurs in the lower-cased fund name."""

    label: str
    keywords: tuple[str, ...]

    def matches(self, name: str) -> bool:
        return any(keyword in name for keyword in self.keywords)


# Evaluated top to bottom, first match wins. "index" co-occurs with cap-size
# terms (e.g. "Nifty Smallcap 250 Index Fund"), so Index stays first.
FUND_CATEGORY_RULES: tuple[FundCategoryRule, ...] = (
    FundCategoryRule(
        "Index Fund",
        ("index", "nifty 50", "sensex", "nifty next 50", "nifty50", "etf"),
    ),
    FundCategoryRule("ELSS", ("elss", "tax saver", "tax saving", "taxsaver")),
    FundCategoryRule("Liquid", ("liquid", "money market", "overnight")),
    FundCategoryRule(
        "Debt",
        (
            "debt",
            "bond",
            "gilt",
            "corporate bond",
            "credit risk",
            "dynamic bond",
            "short term",
            "ultra short",
            "medium term",
            "long term",
            "banking & psu",
            "floating rate",
        ),
    ),
    FundCategoryRule(
        "Hybrid",
        (
            "hybrid",
            "balanced",
            "equity savings",
            "arbitrage",
            "aggressive hybrid",
            "conservative hybrid",
            "dynamic asset",
            "multi asset",
        ),
    ),
    FundCategoryRule(
        "International",
        (
            "international",
            "global",
            "us equity",
            "nasdaq",
            "s&p 500",
            "emerging market",
            "feeder",
            "fof",
            "fund of fund",
        ),
    ),
    FundCategoryRule(
        "Sectoral",
        (
            "sectoral",
            "thematic",
            "banking",
            "pharma",
            "healthcare",
            "technology",
            "infrastructure",
            "consumption",
            "manufacturing",
            "psu equity",
            "dividend yield",
            "value fund",
            "focused",
        ),
    ),
    FundCategoryRule("Small Cap", ("small cap", "smallcap")),
    FundCategoryRule("Mid Cap", ("mid cap", "midcap")),
    FundCategoryRule("Large Cap", ("large cap", "largecap", "bluechip", "blue chip")),
    FundCategoryRule("Flexi Cap", ("flexi cap", "flexicap")),
    FundCategoryRule("Multi Cap", ("multi cap", "multicap")),
    FundCategoryRule("Large Cap", ("large & mid", "large and mid")),
)
