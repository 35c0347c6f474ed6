# icefire_proxy

This package is the core of a Redis-protocol proxy, written in pure Python with no third-party dependencies.

It decodes client requests in RESP. Each command is checked against a table of known Redis commands. The command then runs through a chain of middleware. Finally it is forwarded to a backend client that you supply: either a single node or a cluster.

## Modules

- **`icefire_proxy.mapper`**: the command table.
  - Each entry is an `OpInfo` with a `name`, an `OpFlag` and an `args_verify` check.
  - The `OpFlag` methods are `is_read_only()`, `is_master_only()` and `is_not_allowed()`.
  - The argument-count checks are built with `equal`, `less`, `greater` and `modulos`.
  - `lookup(name)` returns the entry for an upper-case name, or `None` if there is no entry.
- **`icefire_proxy.context`**
  - `Context` holds the writer, the arguments, the upper-cased command name, its flags and the reply.
  - `next()` runs the handlers that remain. `abort()` stops the handlers still pending. `reset()` clears the context.
  - `Routes` is the abstract router interface.
  - `last_handler(chain)` returns the final handler of a chain.
- **`icefire_proxy.errors`**
  - The classes are `RouterError`, `LocalWriterError`, `LocalFlushError` and `CommandTypeError`.
  - `unknown_command(cmd)` builds the unknown-command error and `wrong_arguments(cmd)` builds the wrong-arguments error. Their replies look like this:
    ```
    ERR command resp type not support`FLUSHALL`
    ERR wrong number of arguments for 'HGET' command
    ```
- **`icefire_proxy.writer`**
  - `RespWriter` buffers RESP replies: simple strings, bulk strings (`None` becomes a nil bulk), integers, errors and arrays. `flush()` sends the buffer to a socket (`sendall`) or to any object with `write`.
  - The helpers are `write_simple_string`, `write_bulk`, `write_int`, `write_bulk_strings`, `write_objects` and `recursively_write_objects`. Each one writes a single reply and then flushes.
    - If writing fails, they raise `LocalWriterError`.
    - If flushing fails, they raise `LocalFlushError`.
  - `write_error(local, err)` writes an error reply and flushes. It lets stream failures through unchanged.
- **Middleware**
  - `ignore_cmd_middleware(enable, cmd_list)` is in `icefire_proxy.ignorecmd`. It raises the unknown-command error for each listed command.
  - `namespace(prefix)` is in `icefire_proxy.namespace`. It puts `prefix:` in front of each key argument. The key positions come from `key_indexes`, `first_key`, `all_key` and `odd_key`.
  - `key_monitor_middleware(monitor, slow_query_ignore_cmd)` is in `icefire_proxy.keymonitor`.
    - It counts the commands it sees in the middleware's `.stats`, a `CommandStats` object.
    - It reports hot keys, big keys (through the `bh_*` handlers) and slow queries to the monitor object you pass in. That object's required interface is given in the module docstring.
- **Routers**
  - `BaseRouter` is in `icefire_proxy.routes`.
    - `use(...)` adds middleware.
    - `add_command(...)` registers a handler.
    - `init_cmd()` installs `COMMAND`, `PING`, `QUIT` and a forwarding handler for every other command.
    - `handle(writer, args)` validates a command and dispatches it.
  - `NodeRouter` is in `icefire_proxy.node_router`. It forwards commands through a connection pool you supply, using `get()` and `close()`.
  - `ClusterRouter` is in `icefire_proxy.cluster_router`.
    - It forwards commands to a cluster client you supply.
    - When slave operation is on, read-only commands go to slaves.
    - `MGET`, `DEL` and `EXISTS` are split into per-key batches. The counts from `DEL` and `EXISTS` are added together.
- **`icefire_proxy.session`**
  - `RespDecoder` reads requests from a binary stream.
  - `ConnectionGate` applies an optional IP white list in `accept(remote_addr)` and counts open connections.
  - `serve_connection(router, stream, writer)` runs the request loop for one client. The loop stops at end of input, on a malformed request, or after a failed command.
- **`icefire_proxy.utils`** and **`icefire_proxy.reader`** hold small helpers and a growable read buffer (`Reader`).

## Example

```python
import io

from icefire_proxy.node_router import NodeRouter
from icefire_proxy.session import serve_connection
from icefire_proxy.writer import RespWriter


class Conn:
    def do(self, cmd, *args):
        return b"bar"

    def close(self):
        pass


class Pool:
    def get(self):
        return Conn()

    def close(self):
        pass


router = NodeRouter(Pool())
router.init_cmd()

out = io.BytesIO()
request = io.BytesIO(b"*2\r\n$3\r\nGET\r\n$3\r\nfoo\r\n")
serve_connection(router, request, RespWriter(out))
print(out.getvalue())  # b'$3\r\nbar\r\n'
```

## What this package does not do

- It does not listen on a port and does not accept network connections. You have to call `serve_connection` from your own server loop.
- It contains no Redis client. The connection pool for `NodeRouter` and the cluster client for `ClusterRouter` must be supplied by you.
- It does not read configuration files.
- It does not export metrics. The key monitor calls methods on a monitor object that you provide.
- It has no command-line program.

## Tests

Install the `test` extra and run `pytest`.