# tihu

Pieces of a Persian text-to-speech engine that can be used on their own. These
pieces are UTF-8/16/32 conversion, character classification, tokenizing with
inline events, driving an `mbrola` process, and writing PCM WAV files.

## Installation

```
pip install tihu
```

There are no dependencies outside the standard library.

`tihu.mbrowrap` and `tihu.voice` start an external `mbrola` program. By default
they look for `./mbrola`; pass another path as `Mbrola(executable=...)`. They
also need an mbrola voice database. Both rely on `/proc` and `select.poll`, so
they work on Linux only. Everything else is pure Python.

## Modules

- `tihu.constants`: the engine's enumerations `ErrorCode`, `Param`,
  `CallbackReturn`, `CallbackMessage` and `Voice`.
  - `error_string(code)` returns the message for an error code and raises
    `ValueError` if the code is unknown.
  - `version()` returns `"2.1.0"`.
- `tihu.utf8_core`: UTF-8 validation on byte sequences.
  - `validate_next(data, pos)` returns `(Utf8Status, code_point, next_pos)`.
  - The other helpers are `find_invalid`, `is_valid`, `starts_with_bom`,
    `sequence_length` and `is_code_point_valid`.
- `tihu.utf8`: checked conversions.
  - `append`, `next_code_point`, `prior`, `advance`, `distance`,
    `replace_invalid`, `utf16to8`, `utf8to16`, `utf32to8` and `utf8to32`.
  - Errors are raised as subclasses of `UtfError`: `InvalidCodePoint`,
    `InvalidUtf8`, `InvalidUtf16` and `NotEnoughRoom`.
- `tihu.utf8_unchecked`: the same conversions with no validation. Malformed
  input is decoded by its bit patterns alone.
- `tihu.char_map`: `TokenType`, `CharMap` and `CharMapper`. A `CharMap` gives
  one UTF-16 code unit a normalised form and a token type. A `CharMapper` is the
  table of them.
- `tihu.tokenizer`: `Tokenizer` splits `Corpus.text` into `Word` objects. It
  recognises these inline events:
  - `/mark:…/`, `/volume:…/`, `/pitch:…/`, `/speed:…/`, `/silence:…/` and
    `/spell:…/` attach an `Event` to the following word.
  - `/offset:N/` resets the running text offset.
  - `//` stands for a slash character.

  Persian text is normalised. A trailing ZWNJ is dropped, redundant ZWNJs are
  skipped, tatweel is removed, and ligatures are expanded.
- `tihu.mbrowrap`: `Mbrola` runs one mbrola child process through non-blocking
  pipes.
  - `init`, `write`, `flush`, `read`, `reset`, `set_volume_ratio`,
    `last_error` and `close`.
  - Failures raise `MbrolaError`.
- `tihu.voice`: `MbrolaVoice` wraps `Mbrola` with the engine's scales.
  - `pitch_command(pitch)` takes pitch in −10..10.
  - `rate_command(rate)` maps the rate onto a ratio between 2.2 and 0.2.
  - `volume_ratio(volume)` maps 0..100 onto 0.2..3.0.
- `tihu.wav`: `wav_header(channels, sample_rate, bits_per_sample, data_size)`
  builds the 44-byte header. `WavWriter` is a context manager that patches the
  data size into the header when it closes.

## Examples

```python
from tihu import utf8
from tihu.wav import WavWriter

assert utf8.utf8to16("سلام".encode()) == [0x633, 0x644, 0x627, 0x645]

with WavWriter("/tmp/out.wav", 1, 22050, 16) as wav:
    wav.write(b"\x00\x00" * 22050)
```

Tokenizing with a small hand-built table:

```python
from tihu.char_map import CharMap, CharMapper, TokenType
from tihu.tokenizer import Corpus, EventType, Tokenizer

mapper = CharMapper()
for ch in "abcdefghijklmnopqrstuvwxyz":
    mapper.set_char_map(ord(ch), CharMap(ch, ord(ch), TokenType.ENGLISH))
mapper.set_char_map(ord(" "), CharMap(" ", ord(" "), TokenType.DELIMITER))
mapper.set_char_map(ord("/"), CharMap("/", ord("/"), TokenType.PUNCTUATION))

corpus = Corpus("/mark:start/hi there")
Tokenizer(mapper).parse_text(corpus)
assert [w.text for w in corpus.words] == ["hi", "there"]
assert corpus.words[0].events[0].kind is EventType.BOOKMARK
```

`Tokenizer.load(path)` reads such a table from a file. Each line of the file has
five tab-separated fields:

1. the letter's code
2. the letter
3. the normalised code
4. the normalised text
5. a one-letter `TokenType` value

Space and tab are always added as delimiters.

## What it does not do

- It is not a complete speech engine. Nothing turns words into phonemes or tags
  parts of speech. There is no eSpeak back end, no resampling and no engine that
  reports audio through callbacks. The enumerations in `tihu.constants` describe
  that interface, but nothing in the package implements it.
- It ships no data: no token table for `Tokenizer.load`, and no mbrola
  executable or voice database.
- It installs no command-line program and no server.

## Tests

```
pip install "tihu[test]"
pytest
```