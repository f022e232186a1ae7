"""
Restartable file sources. Each traversal of one of these objects opens its own handle and
closes it when the traversal ends, so file-backed sequences can be walked any number of times.
"""
import builtins
import bz2
import csv
import gzip
import lzma

import simdjson as json

from lazily.logger import get_logger

logger = get_logger()


class ReusableFile(object):
    """
    Line iterable over a file path. Every call to iter() opens a new handle that is closed as
    soon as that iterator is exhausted or closed, so a traversal that stops early does not keep
    the file open.
    """

    def __init__(self, path, mode="r", buffering=-1, encoding=None, errors=None, newline=None):
        """
        :param path: file to read
        :param mode: read mode
        :param buffering: passed to builtins.open
        :param encoding: text encoding
        :param errors: decoding error handler
        :param newline: newline translation
        """
        self.path = path
        self.mode = mode
        self.buffering = buffering
        self.encoding = encoding
        self.errors = errors
        self.newline = newline

    def _text_options(self):
        if "b" in self.mode:
            return {}
        return {"encoding": self.encoding, "errors": self.errors, "newline": self.newline}

    def _open(self):
        return builtins.open(self.path, mode=self.mode, buffering=self.buffering, **self._text_options())

    def __iter__(self):
        with self._open() as handle:
            yield from handle

    def __repr__(self):
        return f"{type(self).__name__}({self.path!r})"


class CompressedFile(ReusableFile):
    """ReusableFile decompressed on the fly by the module function in ``opener``."""

    magic_bytes = None
    opener = None

    def __init__(self, path, mode="rt", **kwargs):
        super(CompressedFile, self).__init__(path, mode=mode, **kwargs)

    @classmethod
    def is_compressed(cls, data):
        return data.startswith(cls.magic_bytes)

    def _open(self):
        return type(self).opener(self.path, mode=self.mode, **self._text_options())


class GZFile(CompressedFile):
    magic_bytes = b"\x1f\x8b\x08"
    opener = staticmethod(gzip.open)


class BZ2File(CompressedFile):
    magic_bytes = b"\x42\x5a\x68"
    opener = staticmethod(bz2.open)


class XZFile(CompressedFile):
    magic_bytes = b"\xfd\x37\x7a\x58\x5a\x00"
    opener = staticmethod(lzma.open)


COMPRESSION_CLASSES = [GZFile, BZ2File, XZFile]
N_COMPRESSION_CHECK_BYTES = max(len(cls.magic_bytes) for cls in COMPRESSION_CLASSES)


def get_read_function(filename, disable_compression):
    """
    Reader class for filename, chosen from the file's leading bytes.
    :param filename: file to inspect
    :param disable_compression: always use the plain reader
    :return: ReusableFile or a CompressedFile subclass
    """
    if disable_compression:
        return ReusableFile
    with open(filename, "rb") as f:
        start_bytes = f.read(N_COMPRESSION_CHECK_BYTES)
    for cls in COMPRESSION_CLASSES:
        if cls.is_compressed(start_bytes):
            return cls
    return ReusableFile


def open_reusable(path, mode="r", disable_compression=False, **kwargs):
    """
    Pick the reader matching the file's magic bytes and build it. Compressed readers default to
    text mode ("rt") unless "b" is in mode.
    :param path: file to read
    :param mode: read mode
    :param disable_compression: read the raw bytes even if the file looks compressed
    :param kwargs: passed to the reader (encoding, errors, newline, buffering)
    :return: ReusableFile or one of its compressed subclasses
    """
    reader = get_read_function(path, disable_compression)
    if reader is not ReusableFile and "t" not in mode and "b" not in mode:
        mode += "t"
    logger.d("opening %s with %s in mode %s", path, reader.__name__, mode)
    return reader(path, mode=mode, **kwargs)


class JsonLinesFile(object):
    """
    One parsed JSON document per non-blank line of a (possibly compressed) file. Parsing goes
    through simdjson; a malformed line raises and aborts the traversal.
    """

    def __init__(self, path, disable_compression=False, **kwargs):
        self.file = open_reusable(path, mode="r", disable_compression=disable_compression, **kwargs)

    def __iter__(self):
        lines = iter(self.file)
        try:
            for line in lines:
                if line.strip():
                    yield json.loads(line)
        finally:
            lines.close()

    def __repr__(self):
        return f"JsonLinesFile({self.file.path!r})"


class CsvFile(object):
    """csv.reader rows of a (possibly compressed) file, one reader per traversal."""

    def __init__(self, path, dialect="excel", disable_compression=False, **fmtparams):
        self.file = open_reusable(path, mode="r", disable_compression=disable_compression, newline="")
        self.dialect = dialect
        self.fmtparams = fmtparams

    def __iter__(self):
        lines = iter(self.file)
        try:
            yield from csv.reader(lines, dialect=self.dialect, **self.fmtparams)
        finally:
            lines.close()

    def __repr__(self):
        return f"CsvFile({self.file.path!r})"
