"""
DexPaprika Models - Typed views of API responses.

from_dict() is lenient: missing keys fall back to defaults and unknown
keys are ignored, so additive API changes never break decoding.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


def _str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _int(data: dict[str, Any], key: str) -> int:
    value = data.get(key)
    return 0 if value is None else int(value)


def _float(data: dict[str, Any], key: str) -> float:
    value = data.get(key)
    return 0.0 if value is None else float(value)


def _opt_float(data: dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    return None if value is None else float(value)


def _list(data: dict[str, Any], key: str) -> list[Any]:
    return data.get(key) or []


# ============================================================
# NETWORKS / DEXES
# ============================================================

@dataclass(frozen=True)
class Network:
    """A supported blockchain network."""
    id: str
    display_name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Network":
        return cls(id=_str(data, "id"), display_name=_str(data, "display_name"))


@dataclass(frozen=True)
class PageInfo:
    """Pagination block returned by list endpoints."""
    limit: int = 0
    page: int = 0
    total_items: int = 0
    total_pages: int = 0

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "PageInfo":
        data = data or {}
        return cls(
            limit=_int(data, "limit"),
            page=_int(data, "page"),
            total_items=_int(data, "total_items"),
            total_pages=_int(data, "total_pages"),
        )


@dataclass(frozen=True)
class Dex:
    """A decentralized exchange on one network."""
    id: str
    name: str = ""
    chain: str = ""
    protocol: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Dex":
        return cls(
            id=_str(data, "dex_id"),
            name=_str(data, "dex_name"),
            chain=_str(data, "chain"),
            protocol=_str(data, "protocol"),
        )


@dataclass(frozen=True)
class DexesResponse:
    dexes: list[Dex] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=PageInfo)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DexesResponse":
        return cls(
            dexes=[Dex.from_dict(d) for d in _list(data, "dexes")],
            page_info=PageInfo.from_dict(data.get("page_info")),
        )


# ============================================================
# POOLS
# ============================================================

@dataclass(frozen=True)
class Token:
    """A token as listed inside a pool."""
    id: str
    name: str = ""
    symbol: str = ""
    chain: str = ""
    decimals: int = 0
    added_at: str = ""
    fdv: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Token":
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            symbol=_str(data, "symbol"),
            chain=_str(data, "chain"),
            decimals=_int(data, "decimals"),
            added_at=_str(data, "added_at"),
            fdv=_opt_float(data, "fdv"),
        )


@dataclass(frozen=True)
class Pool:
    """A liquidity pool summary."""
    id: str
    dex_id: str = ""
    dex_name: str = ""
    chain: str = ""
    volume_usd: float = 0.0
    created_at: str = ""
    created_at_block_number: int = 0
    transactions: int = 0
    price_usd: float = 0.0
    last_price_change_usd_5m: float = 0.0
    last_price_change_usd_1h: float = 0.0
    last_price_change_usd_24h: float = 0.0
    fee: float = 0.0
    tokens: list[Token] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Pool":
        return cls(
            id=_str(data, "id"),
            dex_id=_str(data, "dex_id"),
            dex_name=_str(data, "dex_name"),
            chain=_str(data, "chain"),
            volume_usd=_float(data, "volume_usd"),
            created_at=_str(data, "created_at"),
            created_at_block_number=_int(data, "created_at_block_number"),
            transactions=_int(data, "transactions"),
            price_usd=_float(data, "price_usd"),
            last_price_change_usd_5m=_float(data, "last_price_change_usd_5m"),
            last_price_change_usd_1h=_float(data, "last_price_change_usd_1h"),
            last_price_change_usd_24h=_float(data, "last_price_change_usd_24h"),
            fee=_float(data, "fee"),
            tokens=[Token.from_dict(t) for t in _list(data, "tokens")],
        )


@dataclass(frozen=True)
class PoolsResponse:
    pools: list[Pool] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=PageInfo)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PoolsResponse":
        return cls(
            pools=[Pool.from_dict(p) for p in _list(data, "pools")],
            page_info=PageInfo.from_dict(data.get("page_info")),
        )


@dataclass(frozen=True)
class TimeIntervalMetrics:
    """Trading metrics over one time window."""
    last_price_usd_change: float = 0.0
    volume_usd: float = 0.0
    buy_usd: float = 0.0
    sell_usd: float = 0.0
    sells: int = 0
    buys: int = 0
    txns: int = 0

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "TimeIntervalMetrics":
        data = data or {}
        return cls(
            last_price_usd_change=_float(data, "last_price_usd_change"),
            volume_usd=_float(data, "volume_usd"),
            buy_usd=_float(data, "buy_usd"),
            sell_usd=_float(data, "sell_usd"),
            sells=_int(data, "sells"),
            buys=_int(data, "buys"),
            txns=_int(data, "txns"),
        )

    @classmethod
    def optional(cls, data: Optional[dict[str, Any]]) -> Optional["TimeIntervalMetrics"]:
        return None if data is None else cls.from_dict(data)


@dataclass(frozen=True)
class PoolDetails:
    """Full detail for one pool."""
    id: str
    created_at_block_number: int = 0
    chain: str = ""
    created_at: str = ""
    factory_id: str = ""
    dex_id: str = ""
    dex_name: str = ""
    tokens: list[Token] = field(default_factory=list)
    last_price: float = 0.0
    last_price_usd: float = 0.0
    fee: float = 0.0
    price_time: str = ""
    day: TimeIntervalMetrics = field(default_factory=TimeIntervalMetrics)
    hour6: TimeIntervalMetrics = field(default_factory=TimeIntervalMetrics)
    hour1: TimeIntervalMetrics = field(default_factory=TimeIntervalMetrics)
    minute30: TimeIntervalMetrics = field(default_factory=TimeIntervalMetrics)
    minute15: TimeIntervalMetrics = field(default_factory=TimeIntervalMetrics)
    minute5: TimeIntervalMetrics = field(default_factory=TimeIntervalMetrics)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PoolDetails":
        return cls(
            id=_str(data, "id"),
            created_at_block_number=_int(data, "created_at_block_number"),
            chain=_str(data, "chain"),
            created_at=_str(data, "created_at"),
            factory_id=_str(data, "factory_id"),
            dex_id=_str(data, "dex_id"),
            dex_name=_str(data, "dex_name"),
            tokens=[Token.from_dict(t) for t in _list(data, "tokens")],
            last_price=_float(data, "last_price"),
            last_price_usd=_float(data, "last_price_usd"),
            fee=_float(data, "fee"),
            price_time=_str(data, "price_time"),
            day=TimeIntervalMetrics.from_dict(data.get("24h")),
            hour6=TimeIntervalMetrics.from_dict(data.get("6h")),
            hour1=TimeIntervalMetrics.from_dict(data.get("1h")),
            minute30=TimeIntervalMetrics.from_dict(data.get("30m")),
            minute15=TimeIntervalMetrics.from_dict(data.get("15m")),
            minute5=TimeIntervalMetrics.from_dict(data.get("5m")),
        )


@dataclass(frozen=True)
class OHLCVRecord:
    """One Open-High-Low-Close-Volume candle."""
    time_open: str
    time_close: str = ""
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    close: float = 0.0
    volume: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OHLCVRecord":
        return cls(
            time_open=_str(data, "time_open"),
            time_close=_str(data, "time_close"),
            open=_float(data, "open"),
            high=_float(data, "high"),
            low=_float(data, "low"),
            close=_float(data, "close"),
            volume=_int(data, "volume"),
        )

    @classmethod
    def list_from(cls, data: list[dict[str, Any]]) -> list["OHLCVRecord"]:
        if not isinstance(data, list):
            raise TypeError(f"expected a list of OHLCV records, got {type(data).__name__}")
        return [cls.from_dict(item) for item in data]


@dataclass(frozen=True)
class Transaction:
    """
    A swap/transfer touching a pool.

    Amounts are kept as the raw JSON values (the API returns either
    numbers or strings).
    """
    id: str
    log_index: int = 0
    transaction_index: int = 0
    pool_id: str = ""
    sender: str = ""
    recipient: str = ""
    token_0: str = ""
    token_1: str = ""
    amount_0: Any = None
    amount_1: Any = None
    created_at_block_number: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        return cls(
            id=_str(data, "id"),
            log_index=_int(data, "log_index"),
            transaction_index=_int(data, "transaction_index"),
            pool_id=_str(data, "pool_id"),
            sender=_str(data, "sender"),
            recipient=_str(data, "recipient"),
            token_0=_str(data, "token_0"),
            token_1=_str(data, "token_1"),
            amount_0=data.get("amount_0"),
            amount_1=data.get("amount_1"),
            created_at_block_number=_int(data, "created_at_block_number"),
        )


@dataclass(frozen=True)
class TransactionsResponse:
    transactions: list[Transaction] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=PageInfo)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TransactionsResponse":
        return cls(
            transactions=[Transaction.from_dict(t) for t in _list(data, "transactions")],
            page_info=PageInfo.from_dict(data.get("page_info")),
        )


# ============================================================
# TOKENS
# ============================================================

@dataclass(frozen=True)
class TokenSummary:
    """Aggregate metrics for a token across its pools."""
    price_usd: float = 0.0
    fdv: float = 0.0
    liquidity_usd: float = 0.0
    pools: Optional[int] = None
    day: Optional[TimeIntervalMetrics] = None
    hour6: Optional[TimeIntervalMetrics] = None
    hour1: Optional[TimeIntervalMetrics] = None
    minute30: Optional[TimeIntervalMetrics] = None
    minute15: Optional[TimeIntervalMetrics] = None
    minute5: Optional[TimeIntervalMetrics] = None
    minute1: Optional[TimeIntervalMetrics] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenSummary":
        pools = data.get("pools")
        return cls(
            price_usd=_float(data, "price_usd"),
            fdv=_float(data, "fdv"),
            liquidity_usd=_float(data, "liquidity_usd"),
            pools=None if pools is None else int(pools),
            day=TimeIntervalMetrics.optional(data.get("24h")),
            hour6=TimeIntervalMetrics.optional(data.get("6h")),
            hour1=TimeIntervalMetrics.optional(data.get("1h")),
            minute30=TimeIntervalMetrics.optional(data.get("30m")),
            minute15=TimeIntervalMetrics.optional(data.get("15m")),
            minute5=TimeIntervalMetrics.optional(data.get("5m")),
            minute1=TimeIntervalMetrics.optional(data.get("1m")),
        )


@dataclass(frozen=True)
class TokenDetails:
    """Full detail for one token."""
    id: str
    name: str = ""
    symbol: str = ""
    chain: str = ""
    decimals: int = 0
    total_supply: float = 0.0
    description: str = ""
    website: str = ""
    explorer: str = ""
    added_at: str = ""
    summary: Optional[TokenSummary] = None
    last_updated: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenDetails":
        summary = data.get("summary")
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            symbol=_str(data, "symbol"),
            chain=_str(data, "chain"),
            decimals=_int(data, "decimals"),
            total_supply=_float(data, "total_supply"),
            description=_str(data, "description"),
            website=_str(data, "website"),
            explorer=_str(data, "explorer"),
            added_at=_str(data, "added_at"),
            summary=None if summary is None else TokenSummary.from_dict(summary),
            last_updated=_str(data, "last_updated"),
        )


# ============================================================
# SEARCH / STATS
# ============================================================

@dataclass(frozen=True)
class DexInfo:
    """DEX entry in search results."""
    id: str
    dex_id: str = ""
    dex_name: str = ""
    chain: str = ""
    volume_usd_24h: float = 0.0
    txns_24h: int = 0
    pools_count: int = 0
    protocol: str = ""
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DexInfo":
        return cls(
            id=_str(data, "id"),
            dex_id=_str(data, "dex_id"),
            dex_name=_str(data, "dex_name"),
            chain=_str(data, "chain"),
            volume_usd_24h=_float(data, "volume_usd_24h"),
            txns_24h=_int(data, "txns_24h"),
            pools_count=_int(data, "pools_count"),
            protocol=_str(data, "protocol"),
            created_at=_str(data, "created_at"),
        )


@dataclass(frozen=True)
class SearchResult:
    tokens: list[TokenDetails] = field(default_factory=list)
    pools: list[Pool] = field(default_factory=list)
    dexes: list[DexInfo] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchResult":
        return cls(
            tokens=[TokenDetails.from_dict(t) for t in _list(data, "tokens")],
            pools=[Pool.from_dict(p) for p in _list(data, "pools")],
            dexes=[DexInfo.from_dict(d) for d in _list(data, "dexes")],
        )


@dataclass(frozen=True)
class Stats:
    """Ecosystem-wide counters."""
    chains: int = 0
    factories: int = 0
    pools: int = 0
    tokens: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Stats":
        return cls(
            chains=_int(data, "chains"),
            factories=_int(data, "factories"),
            pools=_int(data, "pools"),
            tokens=_int(data, "tokens"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ============================================================
# REQUEST OPTIONS
# ============================================================

@dataclass
class ListOptions:
    """Paging and sorting for list endpoints."""
    page: int = 0
    limit: int = 0
    sort: str = ""
    order_by: str = ""

    def to_params(self) -> dict[str, Any]:
        """Query parameters; zero/empty values are left out."""
        params: dict[str, Any] = {}
        if self.page > 0:
            params["page"] = self.page
        if self.limit > 0:
            params["limit"] = self.limit
        if self.sort:
            params["sort"] = self.sort
        if self.order_by:
            params["order_by"] = self.order_by
        return params


@dataclass
class OHLCVOptions:
    """Window and granularity for OHLCV queries."""
    start: str = ""
    end: str = ""
    limit: int = 0
    interval: str = ""
    inversed: bool = False

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.start:
            params["start"] = self.start
        if self.end:
            params["end"] = self.end
        if self.limit > 0:
            params["limit"] = self.limit
        if self.interval:
            params["interval"] = self.interval
        if self.inversed:
            params["inversed"] = "true"
        return params
