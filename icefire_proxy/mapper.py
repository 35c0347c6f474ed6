"""The table of known commands, their flags and argument-count checks."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass

VerifyFunc = Callable[[int], bool]


class OpFlag(enum.IntFlag):
    """Properties of a command."""

    NONE = 0
    WRITE = 1
    MASTER_ONLY = 2
    MAY_WRITE = 4
    NOT_ALLOW = 8

    def is_not_allowed(self) -> bool:
        return bool(self & OpFlag.NOT_ALLOW)

    def is_read_only(self) -> bool:
        return not (self & (OpFlag.WRITE | OpFlag.MAY_WRITE))

    def is_master_only(self) -> bool:
        return bool(self & (OpFlag.WRITE | OpFlag.MAY_WRITE | OpFlag.MASTER_ONLY))


def equal(num: int) -> VerifyFunc:
    """Accept exactly ``num`` arguments."""
    return lambda args_len: args_len == num


def less(num: int) -> VerifyFunc:
    """Accept fewer than ``num`` arguments."""
    return lambda args_len: args_len < num


def greater(num: int) -> VerifyFunc:
    """Accept ``num`` or more arguments."""
    return lambda args_len: args_len >= num


def modulos(num: int, mod_val: int) -> VerifyFunc:
    """Accept argument counts congruent to ``mod_val`` modulo ``num``."""
    return lambda args_len: args_len % num == mod_val


@dataclass(frozen=True)
class OpInfo:
    """A known command: name, flags and argument-count check."""

    name: str
    flag: OpFlag
    args_verify: VerifyFunc


_W = OpFlag.WRITE
_M = OpFlag.MASTER_ONLY
_MW = OpFlag.MAY_WRITE
_NA = OpFlag.NOT_ALLOW
_R = OpFlag.NONE

_TABLE = [
    ("APPEND", _W, equal(3)),
    ("ASKING", _NA, equal(2)),
    ("AUTH", _R, equal(2)),
    ("BGREWRITEAOF", _NA, greater(1)),
    ("BGSAVE", _NA, greater(1)),
    ("BITCOUNT", _R, greater(2)),
    ("BITFIELD", _W, greater(2)),
    ("BITOP", _W | _NA, greater(4)),
    ("BITPOS", _R, greater(3)),
    ("BLPOP", _W | _NA, greater(3)),
    ("BRPOP", _W | _NA, greater(3)),
    ("BRPOPLPUSH", _W | _NA, equal(4)),
    ("CLIENT", _NA, greater(1)),
    ("CLUSTER", _NA, greater(1)),
    ("COMMAND", _R, greater(1)),
    ("CONFIG", _NA, greater(1)),
    ("DBSIZE", _NA, greater(1)),
    ("DEBUG", _NA, greater(1)),
    ("DECR", _W, equal(2)),
    ("DECRBY", _W, equal(3)),
    ("DEL", _W, greater(2)),
    ("DISCARD", _NA, greater(1)),
    ("DUMP", _R, equal(2)),
    ("ECHO", _R, equal(2)),
    ("EVAL", _W, greater(3)),
    ("EVALSHA", _W, greater(3)),
    ("EXEC", _NA, greater(1)),
    ("EXISTS", _R, greater(2)),
    ("EXPIRE", _W, equal(3)),
    ("EXPIREAT", _W, equal(3)),
    ("FLUSHALL", _W | _NA, greater(1)),
    ("FLUSHDB", _W | _NA, greater(1)),
    ("GEOADD", _W, greater(5)),
    ("GEODIST", _R, greater(4)),
    ("GEOHASH", _R, greater(3)),
    ("GEOPOS", _R, greater(3)),
    ("GEORADIUS", _W, greater(6)),
    ("GEORADIUSBYMEMBER", _W, greater(5)),
    ("GET", _R, equal(2)),
    ("GETBIT", _R, equal(3)),
    ("GETRANGE", _R, equal(4)),
    ("GETSET", _W, equal(3)),
    ("HDEL", _W, greater(3)),
    ("HEXISTS", _R, equal(3)),
    ("HGET", _R, equal(3)),
    ("HGETALL", _R, equal(2)),
    ("HINCRBY", _W, equal(4)),
    ("HINCRBYFLOAT", _W, equal(4)),
    ("HKEYS", _R, equal(2)),
    ("HLEN", _R, equal(2)),
    ("HMGET", _R, greater(3)),
    ("HMSET", _W, greater(4)),
    ("HOST:", _NA, greater(1)),
    ("HSCAN", _M, greater(3)),
    ("HSET", _W, greater(4)),
    ("HSETNX", _W, equal(4)),
    ("HSTRLEN", _R, equal(3)),
    ("HVALS", _R, equal(2)),
    ("INCR", _W, equal(2)),
    ("INCRBY", _W, equal(3)),
    ("INCRBYFLOAT", _W, equal(3)),
    ("INFO", _NA, greater(1)),
    ("KEYS", _NA, greater(1)),
    ("LASTSAVE", _NA, greater(1)),
    ("LATENCY", _NA, greater(1)),
    ("LINDEX", _R, equal(3)),
    ("LINSERT", _W, equal(5)),
    ("LLEN", _R, equal(2)),
    ("LPOP", _W, greater(2)),
    ("LPUSH", _W, greater(3)),
    ("LPUSHX", _W, greater(3)),
    ("LRANGE", _R, equal(4)),
    ("LREM", _W, equal(4)),
    ("LSET", _W, equal(4)),
    ("LTRIM", _W, equal(4)),
    ("MGET", _R, greater(2)),
    ("MIGRATE", _W | _NA, greater(1)),
    ("MONITOR", _NA, greater(1)),
    ("MOVE", _W | _NA, greater(1)),
    ("MSET", _W, modulos(2, 1)),
    ("MSETNX", _W | _NA, greater(1)),
    ("MULTI", _NA, greater(1)),
    ("OBJECT", _NA, greater(1)),
    ("PERSIST", _W, equal(2)),
    ("PEXPIRE", _W, equal(3)),
    ("PEXPIREAT", _W, equal(3)),
    ("PFADD", _W, greater(3)),
    ("PFCOUNT", _R, greater(2)),
    ("PFDEBUG", _W, greater(1)),
    ("PFMERGE", _W, greater(3)),
    ("PFSELFTEST", _R, greater(1)),
    ("PING", _R, greater(1)),
    ("POST", _NA, greater(1)),
    ("PSETEX", _W, equal(4)),
    ("PSUBSCRIBE", _NA, greater(2)),
    ("PSYNC", _NA, greater(1)),
    ("PTTL", _R, equal(2)),
    ("PUBLISH", _NA, equal(3)),
    ("PUBSUB", _R, greater(2)),
    ("PUNSUBSCRIBE", _NA, greater(1)),
    ("QUIT", _NA, greater(1)),
    ("RANDOMKEY", _NA, greater(1)),
    ("READONLY", _NA, greater(1)),
    ("READWRITE", _NA, greater(1)),
    ("RENAME", _W | _NA, greater(1)),
    ("RENAMENX", _W | _NA, greater(1)),
    ("REPLCONF", _NA, greater(1)),
    ("RESTORE", _W | _NA, greater(1)),
    ("RESTORE-ASKING", _W | _NA, greater(1)),
    ("ROLE", _NA, greater(1)),
    ("RPOP", _W, equal(2)),
    ("RPOPLPUSH", _NA, equal(3)),
    ("RPUSH", _W, greater(3)),
    ("RPUSHX", _W, greater(3)),
    ("SADD", _W, greater(3)),
    ("SAVE", _NA, greater(1)),
    ("SCAN", _M | _NA, greater(1)),
    ("SCARD", _R, equal(2)),
    ("SCRIPT", _NA, greater(1)),
    ("SDIFF", _NA, greater(2)),
    ("SDIFFSTORE", _W | _NA, greater(1)),
    ("SELECT", _NA, equal(1)),
    ("SET", _W, greater(3)),
    ("SETBIT", _W, equal(4)),
    ("SETEX", _W, equal(4)),
    ("SETNX", _W, equal(3)),
    ("SETRANGE", _W, equal(4)),
    ("SHUTDOWN", _NA, greater(1)),
    ("SINTER", _NA, equal(2)),
    ("SINTERSTORE", _NA, greater(3)),
    ("SISMEMBER", _R, equal(3)),
    ("SLAVEOF", _NA, greater(1)),
    ("SLOTSCHECK", _NA, greater(1)),
    ("SLOTSDEL", _W | _NA, greater(1)),
    ("SLOTSHASHKEY", _NA, greater(1)),
    ("SLOTSINFO", _M | _NA, greater(1)),
    ("SLOTSMAPPING", _NA, greater(1)),
    ("SLOTSMGRTONE", _W | _NA, greater(1)),
    ("SLOTSMGRTSLOT", _W | _NA, greater(1)),
    ("SLOTSMGRTTAGONE", _W | _NA, greater(1)),
    ("SLOTSMGRTTAGSLOT", _W | _NA, greater(1)),
    ("SLOTSRESTORE", _W | _NA, greater(1)),
    ("SLOTSMGRTONE-ASYNC", _W | _NA, greater(1)),
    ("SLOTSMGRTSLOT-ASYNC", _W | _NA, greater(1)),
    ("SLOTSMGRTTAGONE-ASYNC", _W | _NA, greater(1)),
    ("SLOTSMGRTTAGSLOT-ASYNC", _W | _NA, greater(1)),
    ("SLOTSMGRT-ASYNC-FENCE", _NA, greater(1)),
    ("SLOTSMGRT-ASYNC-CANCEL", _NA, greater(1)),
    ("SLOTSMGRT-ASYNC-STATUS", _NA, greater(1)),
    ("SLOTSMGRT-EXEC-WRAPPER", _W | _NA, greater(1)),
    ("SLOTSRESTORE-ASYNC", _W | _NA, greater(1)),
    ("SLOTSRESTORE-ASYNC-AUTH", _W | _NA, greater(1)),
    ("SLOTSRESTORE-ASYNC-ACK", _W | _NA, greater(1)),
    ("SLOTSSCAN", _M | _NA, greater(1)),
    ("SLOWLOG", _NA, greater(1)),
    ("SMEMBERS", _R, equal(2)),
    ("SMOVE", _W | _NA, greater(1)),
    ("SORT", _W, greater(2)),
    ("SPOP", _W, greater(2)),
    ("SRANDMEMBER", _R, greater(2)),
    ("SREM", _W, greater(3)),
    ("SSCAN", _M, greater(3)),
    ("STRLEN", _R, equal(2)),
    ("SUBSCRIBE", _NA, greater(1)),
    ("SUBSTR", _R, equal(4)),
    ("SUNION", _NA, greater(1)),
    ("SUNIONSTORE", _W | _NA, greater(1)),
    ("SYNC", _NA, greater(1)),
    ("TIME", _NA, greater(1)),
    ("TOUCH", _W | _NA, greater(1)),
    ("TTL", _R, equal(2)),
    ("TYPE", _R, equal(2)),
    ("UNSUBSCRIBE", _NA, greater(1)),
    ("UNWATCH", _NA, greater(1)),
    ("WAIT", _NA, greater(1)),
    ("WATCH", _NA, greater(1)),
    ("ZADD", _W, greater(4)),
    ("ZCARD", _R, equal(2)),
    ("ZCOUNT", _R, equal(4)),
    ("ZINCRBY", _W, equal(4)),
    ("ZINTERSTORE", _W | _NA, greater(1)),
    ("ZLEXCOUNT", _R, equal(4)),
    ("ZPOPMAX", _MW, greater(2)),
    ("ZPOPMIN", _MW, greater(2)),
    ("ZRANGE", _R, greater(4)),
    ("ZRANGEBYLEX", _R, greater(4)),
    ("ZRANGEBYSCORE", _R, greater(4)),
    ("ZRANK", _R, equal(3)),
    ("ZREM", _W, greater(3)),
    ("ZREMRANGEBYLEX", _W, equal(4)),
    ("ZREMRANGEBYRANK", _W, equal(4)),
    ("ZREMRANGEBYSCORE", _W, equal(4)),
    ("ZREVRANGE", _R, greater(4)),
    ("ZREVRANGEBYLEX", _R, greater(4)),
    ("ZREVRANGEBYSCORE", _R, greater(4)),
    ("ZREVRANK", _R, equal(3)),
    ("ZSCAN", _M, greater(3)),
    ("ZSCORE", _R, equal(3)),
    ("ZUNIONSTORE", _W | _NA, greater(1)),
    ("XACK", _W, greater(4)),
    ("XADD", _W, greater(5)),
    ("XCLAIM", _W, greater(6)),
    ("XDEL", _W, greater(3)),
    ("XLEN", _R, greater(2)),
    ("XINFO", _R, greater(3)),
    ("XPENDING", _R, greater(3)),
    ("XRANGE", _R, greater(4)),
    ("XREAD", _W | _NA, greater(4)),
    ("XREADGROUP", _W, greater(7)),
    ("XREVRANGE", _W, greater(4)),
    ("XTRIM", _W, greater(4)),
    ("XGROUP", _W, greater(4)),
    ("WCONFIG", _W, greater(5)),
]

OP_TABLE: dict[str, OpInfo] = {
    name: OpInfo(name, OpFlag(flag), verify) for name, flag, verify in _TABLE
}


def lookup(name: str) -> OpInfo | None:
    """Return the entry for an upper-case command name, or None."""
    return OP_TABLE.get(name)