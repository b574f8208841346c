# eqminer

Building blocks for a Stratum mining client for Equihash-based coins: a
typed JSON value model and writer for protocol messages, block header
serialization and hashing, and the compact Equihash solution encoding used
when submitting work to a pool.

## Modules

- `eqminer.jsonvalue` – a typed JSON value model. `Value` holds null, bool,
  64-bit integer (signed, or unsigned via `Value.from_uint64`), real, string,
  array or object; objects are ordered lists of `Pair` and keep duplicate
  names. Accessors such as `as_str`, `as_int64`, `as_real` and `as_object`
  raise `TypeMismatchError` when the value holds another type. `ValueType`
  names the kinds; `find_value`, `obj_to_map` and `map_to_obj` work on object
  pairs; `ErrorPosition` describes a parse error by line and column.
- `eqminer.jsonwriter` – `write` renders a value as compact JSON,
  `write_formatted` as indented JSON, `write_stream` writes to a text stream.
  Reals are written with eight decimal places; non-ASCII and control
  characters are escaped as `\uXXXX` by `add_esc_chars`.
- `eqminer.block` – `BlockHeader` (with `serialize`, `deserialize`,
  `equihash_input` and `get_hash`), `Block` with Merkle tree building,
  branches and branch checking, `BlockLocator` and `Uint252`. Helpers:
  `sha256d`, `uint256_to_string`, `uint256_from_hex`, `write_compact_size`
  and `read_compact_size`.
- `eqminer.equihash` – `compress_array` and `get_minimal_from_indices` for
  the minimal solution encoding, `EquihashSolution`, and `ZcashJob` with
  `set_target` (an empty target means the default limit), `clone` and
  `get_submission`.

## Installation

```
pip install .
```

Python 3.10 or later is required; there are no third-party dependencies.

## Examples

Build and write JSON values:

```python
from eqminer.jsonvalue import Value, find_value
from eqminer.jsonwriter import write

msg = Value.from_python({"id": 1, "method": "mining.subscribe", "params": []})
print(write(msg))
print(find_value(msg.as_object(), "method").as_str())
```

Encode an Equihash solution from its indices:

```python
from eqminer.equihash import get_minimal_from_indices

packed = get_minimal_from_indices([0, 1, 2, 3], 20)
```

Hash data the way block headers are hashed:

```python
from eqminer.block import sha256d, uint256_to_string

print(uint256_to_string(sha256d(b"")))
```

## What this package does not do

It does not connect to a pool, schedule or run solvers, or find Equihash
solutions, and it installs no command. It provides the message, header and
solution formats a mining client needs; the network connection, the work
loop and the solvers have to come from elsewhere.

## Tests

```
pip install .[test]
pytest
```