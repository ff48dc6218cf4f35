# supervisory

A small telemetry system over plain TCP, made of three parts:

* **a server** that listens on port 1234 by default, keeps every
  measurement it receives, grouped by the IPv4 address of the host that
  sent it, and answers queries for the latest samples;
* **a producer** that connects to the server and periodically sends a
  random integer within a chosen range, stamped with the current time in
  milliseconds since the epoch;
* **a consumer** that asks the server which hosts have produced data and
  fetches the most recent samples of one of them.

## Installation

```
pip install .
```

No third-party libraries are needed.

## Running

Start the server:

```
supervisory-server [--host 0.0.0.0] [--port 1234]
```

It prints the machine's IPv4 addresses (other than 127.0.0.1) and then
logs every connection, every line received and every disconnection.
Stop it with Ctrl+C.

Start one or more producers, pointing them at the server:

```
supervisory-producer [host] [--port 1234] [--min 0] [--max 100] [--interval 1.0] [--count N]
```

`host` defaults to `127.0.0.1`. A sample is sent every `--interval`
seconds and printed; without `--count` it runs until interrupted.

Read the data back:

```
supervisory-consumer [host] [--port 1234] [--ip ADDRESS] [--samples 30] [--interval 1.0] [--count 1]
```

Without `--ip` it prints the hosts that have sent data. With `--ip` it
fetches the last `--samples` samples of that host `--count` times,
`--interval` seconds apart, and prints them as `time value` lines.

Each command exits with status 1 if it cannot bind or connect.

## Protocol

Every request is one text line; arguments are separated by single spaces.

| Request                 | Effect                                                                         |
|-------------------------|--------------------------------------------------------------------------------|
| `set <time_ms> <value>` | Stores `value` (kept in single precision) at `time_ms` for the sender's address. No reply. |
| `list`                  | Replies with one address per line, `\r\n`-terminated, in ascending order.      |
| `get <address> <n>`     | Replies with the last `n` samples of `address`, one `time value\n` line each.  |

Values in replies use six significant digits. Malformed requests and
unknown commands get no reply.

## Using it as a library

```python
from supervisory.storage import DataStorage
from supervisory.protocol import handle_line
from supervisory.plotter import plot_segments

storage = DataStorage()
handle_line("set 1496156112708 9.16666", "192.0.2.10", storage)
handle_line("set 1496156113708 9.5", "192.0.2.10", storage)
reply = handle_line("get 192.0.2.10 30", "192.0.2.20", storage)

entries = storage.get_data("192.0.2.10", 30)
segments = plot_segments([(e.time, e.measurement) for e in entries], 400, 300, 10)
```

* `supervisory.storage.DataStorage` — thread-safe store with `add_data`,
  `get_data` and `host_list`; samples are `Entry(time, measurement)`.
* `supervisory.protocol.handle_line` — runs one request line and returns
  the reply text.
* `supervisory.server.TelemetryServer` — `start()`, `serve_forever()`,
  `shutdown()` and `ip_list()`, serving one thread per connection over a
  single shared store; usable as a context manager.
* `supervisory.producer.Producer` — `connect()`, `make_sample()`,
  `put_data()` and the generator `run(interval, count)`.
* `supervisory.consumer.Consumer` — `request_host_list()`,
  `request_data(ip, samples)` and `read_data()`; `parse_response` splits
  reply lines into hosts and points.
* `supervisory.plotter.plot_segments` and `Plotter` — map `(time, value)`
  points to pixel line segments `(x1, y1, x2, y2)`.

## What it does not do

There is no graphical window. The consumer keeps its latest points in a
`Plotter` and can compute the line segments for a plot, but nothing draws
them on screen; its command prints the samples as text. The server keeps
its data in memory only, so everything is lost when it stops.

## Tests

```
pip install .[test]
pytest
```