# workpool

Worker thread pools for Python, a message worker pool, and a few helpers for
holding HTTP requests and responses in memory.

## What is in it

- `workpool.pool.ThreadPool` runs `workpool.task.Task` objects on worker
  threads. It has two modes, `PoolMode.FIXED` and `PoolMode.CACHED`. In
  cached mode the pool adds a thread when queued tasks outnumber idle threads,
  up to `set_thread_size_threshold` (1024 by default). Threads beyond the
  initial count leave once they have been idle for `max_idle_time` seconds
  (60 by default).
- `workpool.task.Result` is what `submit_task` returns. `get()` blocks until
  the task has finished and returns an `AnyValue`. If the task raised, `get()`
  raises that exception. `AnyValue.cast(kind)` returns the stored value if it
  is an instance of `kind` and raises `TypeError` otherwise.
- `workpool.task.Semaphore` is the counting semaphore a `Result` waits on.
  After `close()`, `wait()` and `post()` do nothing.
- `workpool.futurepool.FuturePool` is a `ThreadPool` that accepts any callable
  with arguments through `submit(func, *args, **kwargs)` and returns a
  `concurrent.futures.Future`. Its task queue holds two entries by default.
- `workpool.buffer.Buffer` is a growable byte buffer with read and write
  positions and a small reserved area in front of the data.
- `workpool.http_request` has the `Method` enum, `HttpRequest` and
  `HttpResponse` dataclasses, `HttpStatusCode`, `FileWriter` and
  `parse_field_name`. `HttpRequest.save_file_part` writes an uploaded part to a
  uniquely named `upload_<ms>_<n>.dat` file. `HttpRequest.save_form_field`
  stores a field under the `name="..."` found in its part header and raises
  `ValueError` if there is none.
- `workpool.http_context` has `HttpContext`, which holds a request, a byte
  buffer and a `ParseState`. It also has `url_decode` and `sanitize_filename`.
  `sanitize_filename` replaces unsafe characters with `_` and cuts the part
  before the last dot to ten characters.
- `workpool.msgqueue.MessageQueue` is a thread-safe FIFO queue.
  `workpool.workers.MessageWorkerPool` drains such a queue with handler
  threads, calling `handler(header, payload)` for every non-empty payload
  pushed with `push(MessageHeader(...), payload)`.

## Installing

```
pip install .
```

## Running tasks

```python
from workpool.pool import PoolMode, ThreadPool
from workpool.task import Task


class Add(Task):
    def __init__(self, a, b):
        self.a, self.b = a, b

    def run(self):
        return self.a + self.b


with ThreadPool() as pool:
    pool.set_mode(PoolMode.CACHED)  # configure before start()
    pool.start(4)
    result = pool.submit_task(Add(1, 2))
    print(result.get().cast(int))  # 3
```

Configure the pool before calling `start`. Setters called after the pool is
running have no effect, and `set_thread_size_threshold` only applies in cached
mode. `start()` without an argument uses the CPU count.

`submit_task` waits up to `submit_timeout` seconds (1 by default) for room in
the task queue. If the queue stays full, it returns a `Result` whose `valid` is
`False`. Calling `get()` on it returns `AnyValue("")` at once.

`shutdown()`, which leaving the `with` block also calls, lets the workers finish
every queued task and then waits for all of them to exit.

## Futures

```python
from workpool.futurepool import FuturePool

with FuturePool() as pool:
    pool.start(2)
    future = pool.submit(pow, 2, 10)
    print(future.result())  # 1024
```

If the queue stays full past the submit timeout, `submit` returns a future that
is already resolved with `None`.

## Message workers

```python
from workpool.workers import MessageHeader, MessageWorkerPool

pool = MessageWorkerPool(lambda header, payload: print(header.sequence, payload))
pool.create(2)
pool.push(MessageHeader(sequence=1), b"hello")
pool.stop_all()
```

`create` returns once every new thread is running. `stop_all` signals the
workers and joins them; messages still in the queue at that point are not
handled.

## Buffers

```python
from workpool.buffer import Buffer

buf = Buffer()
buf.append(b"hello world")
print(buf.retrieve_as_bytes(5))  # b"hello"
print(buf.readable_bytes())      # 6
```

## Demo

```
workpool-demo
```

This command starts a `FuturePool` with two threads. It submits `sum1(1, 2)`
and five tasks that sleep, then prints `3`. Because the queue is small, some
of the sleeping tasks may be refused. After the pool has shut down, the command
waits `--linger` seconds and then waits for a key press, unless `--no-pause` is
given. `--threads` and `--task-seconds` set the worker count and the sleep
length.

## What it does not do

There is no network server and no HTTP parser. `HttpContext` tracks parse state
and buffered bytes, but nothing here reads requests from sockets, parses
request lines or headers, or routes requests. `HttpResponse` is a plain data
holder and is not serialised to the wire.

## Tests

```
pip install .[test]
pytest
```