from lazily.base import empty
from lazily.io import CsvFile, JsonLinesFile, open_reusable
from lazily.pipeline import Seq
from lazily.util import is_sequence_source


class Stream(object):
    """
    Represents and implements a stream which separates the responsibilities of Seq and
    Seq construction. Exposed as the ``seq`` singleton: calling it lifts values, its methods
    build restartable file-backed sequences.
    """

    def __call__(self, *args):
        """
        Create a Seq using a Seq, list, iterable, async iterable, or a number of arguments.

        seq(1, 2, 3)  # values 1, 2, 3
        seq([1, 2, 3])  # values 1, 2, 3
        seq("abc")  # the single value "abc", strings are never unpacked

        :param args: source to lift, or the values themselves
        :return: Seq
        """
        if len(args) == 0:
            return Seq(empty())
        if len(args) == 1 and is_sequence_source(args[0]):
            return Seq.of(args[0])
        return Seq.of(args)

    def range(self, *args):
        """
        Alias to range function where seq.range(args) is equivalent to seq(range(args)).
        :param args: args to range function
        :return: Seq over range(args)
        """
        return self(range(*args))

    def open(
        self,
        path,
        mode="r",
        buffering=-1,
        encoding=None,
        errors=None,
        newline=None,
        disable_compression=False,
    ):
        """
        Sequence over the lines of a file. gzip, bz2 and xz files are detected from their magic
        bytes and decompressed transparently unless disable_compression is set. The file is
        reopened on every traversal.

        :param path: path to file
        :param mode: file open mode
        :param buffering: passed to builtins.open
        :param encoding: passed to builtins.open
        :param errors: passed to builtins.open
        :param newline: passed to builtins.open
        :param disable_compression: read the file as-is
        :return: Seq of lines in the file
        """
        if "r" not in mode:
            raise ValueError("file must be opened in read mode")
        return self(
            open_reusable(
                path,
                mode=mode,
                disable_compression=disable_compression,
                buffering=buffering,
                encoding=encoding,
                errors=errors,
                newline=newline,
            )
        )

    def jsonl(self, path, encoding=None, disable_compression=False):
        """
        Sequence over a JSON lines file, one parsed document per non-blank line.
        :param path: path to file
        :param encoding: text encoding
        :param disable_compression: read the file as-is
        :return: Seq of parsed documents
        """
        return self(JsonLinesFile(path, disable_compression=disable_compression, encoding=encoding))

    def csv(self, path, dialect="excel", disable_compression=False, **fmtparams):
        """
        Sequence over the rows of a CSV file as produced by csv.reader.
        :param path: path to file
        :param dialect: csv dialect
        :param disable_compression: read the file as-is
        :param fmtparams: passed to csv.reader
        :return: Seq of rows (lists of strings)
        """
        return self(CsvFile(path, dialect=dialect, disable_compression=disable_compression, **fmtparams))


# pylint: disable=invalid-name
seq = Stream()
