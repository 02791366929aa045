# sysprog

Small systems-programming tools built on the Python standard library alone.

| Module                  | What it holds                                                        |
|-------------------------|----------------------------------------------------------------------|
| `sysprog.prop`          | `Decoder` and `unmarshal` for `key: value` text into dataclasses      |
| `sysprog.message`       | `create_message`, `message_content` and `checksum` for framed messages |
| `sysprog.reading`       | `ReadingList`, `Book`, `Progress` and their errors                    |
| `sysprog.argscan`       | `scan_args` and `ArgsScanner` for splitting lines with quoted arguments |
| `sysprog.commands`      | `Command`, `FunctionCommand`, `Registry`, `levenshtein`, `default_registry` |
| `sysprog.stack`         | `Stack`, a shell command whose contents are saved to a file          |
| `sysprog.shell`         | The interactive shell: `run_shell`, `build_registry`, `read_command` |
| `sysprog.pipeline`      | Generator pipelines: read, filter, highlight and count words         |
| `sysprog.files`         | `reverse_file`, `count_lines`, `walk_count`, `QueryWriter`, `search_tree` |
| `sysprog.filesearch`    | `file_search` by file name or by content                             |
| `sysprog.concurrency`   | `Bucket`, `AtomicFloat`, `Clicker`, `UniqueList`, `Counter`, `IdGenerator` |
| `sysprog.service`       | `ServiceManager`, `Settings`, `parse_duration`, `format_duration`    |
| `sysprog.servers`       | TCP and UDP line servers and a framed-message UDP server and client  |
| `sysprog.rpc`           | `ReadingService` over XML-RPC, `make_server` and `call`              |
| `sysprog.maps`          | `MapsClient`, a rate-limited reverse geocoding client                |
| `sysprog.color`         | `Color`, an enum of ANSI colours, and `shuffle_colored`              |
| `sysprog.booklist`      | `BookEntry` and `write_book_list`                                    |

## Installation

```console
pip install .
```

To run the tests:

```console
pip install ".[test]"
pytest
```

## Command-line tools

| Command            | What it does |
|--------------------|--------------|
| `sysprog-shell`    | Interactive shell with `help`, `exit`, `shuffle`, `print` and `stack` |
| `sysprog-search`   | `sysprog-search [-c] [-x a:b] <path> <term>`: files named `term`, or with `-c` lines holding it; `-x` skips the named entries |
| `sysprog-files`    | Subcommands `reverse SRC DST`, `lines PATH`, `walk PATH` and `search PATH QUERY...` |
| `sysprog-pipeline` | Reads standard input and prints the lines holding a term (default `in`) with it highlighted; `--color N` sets the colour, `--count` prints word counts instead |
| `sysprog-service`  | `run`, `install`, `uninstall`, `status`, `start`, `stop`, or `signals` for the signal-driven settings loop |
| `sysprog-server`   | `sysprog-server {tcp,custom,custom-client,udp} host:port` |
| `sysprog-rpc`      | `sysprog-rpc {server,client} host:port` |
| `sysprog-books`    | Writes a fixed book list to the given file, or to standard output |
| `sysprog-colors`   | Prints a line in each colour, then some words shuffled in red and green |
| `sysprog-prop`     | Decodes a built-in property sample and prints the result |

Examples:

```console
sysprog-search -c ~/projects TODO
sysprog-files walk .
sysprog-pipeline search < notes.txt
sysprog-shell
```

### The shell

Arguments are split on whitespace; an argument in single or double quotes may
hold spaces and may run over several lines. Commands: `help`, `exit`,
`shuffle <words...>`, `print <file>` and `stack push <values...>` /
`stack pop`. The stack is loaded from `~/.stack` when the shell starts and
written back when it stops. An unknown command suggests names within an edit
distance of 2.

```text
[home] > stack push "a quoted
multi-line value"
[home] > stack pop
Got: `a quoted
multi-line value`
[home] > hepl
Command "hepl" not found. Maybe you meant: help
```

### The servers

- `tcp` logs every line a client sends; `\x` is logged as a special message,
  and `\q` stops the server.
- `udp` answers each datagram with its trimmed text reversed.
- `custom` answers a framed message (see below) with its content reversed;
  `custom-client` reads lines from standard input, sends them framed and logs
  the replies.

### The service

`ServiceManager` writes an init script to `/etc/init.d/mydaemon`, starts the
daemon with its output in `/var/mydaemon/`, and keeps its pid in
`/var/mydaemon/mydaemon.pid`. Under `signals`, the delay between actions is
read from `~/.multi` on `SIGHUP`, saved on `SIGALRM`, saved before exiting on
`SIGINT`, doubled on `SIGUSR1` and halved on `SIGUSR2`; `SIGQUIT` exits.
Delays are written like `1.5s` or `1h30m`.

## Library use

### Framed messages

```python
from sysprog.message import create_message, message_content, MessageError

frame = create_message(b"hello")
assert message_content(frame) == b"hello"

try:
    message_content(frame[:-1])
except MessageError as exc:
    print("rejected:", exc)
```

A frame is an opening sequence, a two-byte length, a four-byte checksum, the
content and a closing sequence. Content longer than 65535 bytes raises
`MessageError`.

### Reading list

```python
from sysprog.reading import Book, ReadingList

books = ReadingList()
books.add_book(Book(isbn="1540335534", title="The Call of Cthulhu",
                    author="H.P. Lovecraft", pages=36))
books.set_progress("1540335534", 10)
books.advance_progress("1540335534", 40)   # capped at the page count
print(books.get_progress("1540335534"))    # 36
```

An empty ISBN, a duplicate and an unknown book raise `MissingISBNError`,
`DuplicateBookError` and `MissingBookError`, all subclasses of `ReadingError`.

### Property text

```python
import dataclasses
import io
from sysprog.prop import Decoder, UpperString

@dataclasses.dataclass
class Config:
    key1: float = 0.0
    key2: str = ""
    key3: int = dataclasses.field(default=0, metadata={"unsigned": True})
    key4: bool = False
    key5: UpperString = dataclasses.field(default=UpperString(""),
                                          metadata={"prop": "special"})

text = "# comment\nkey1: 10.5\nkey2: some string\nspecial: loud\n"
config = Decoder(io.StringIO(text)).decode(Config())
```

A field is filled from the key that is its name in lower case, or from its
`prop` metadata. Fields starting with `_` are never filled. Blank lines and
lines starting with `#` are skipped, and unknown keys are ignored. A line
without a `:`, or a value of the wrong type, raises `DecodeError` with the
line number.

### Concurrency helpers

```python
from sysprog.concurrency import Bucket, IdGenerator

ids = IdGenerator()
first, second = next(ids), next(ids)   # 0, 1

bucket = Bucket(10)
taken = bucket.add(4)                  # 4; at most what is left is taken
```

## What is not included

There is no HTTP server or file server, no network scanner, and no encoders
for BSON, gob, protocol buffers or YAML. `sysprog.maps` is a library only and
has no command of its own. The RPC service speaks XML-RPC over HTTP and keeps
its reading list in memory only.