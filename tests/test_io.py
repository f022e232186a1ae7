import bz2
import gzip
import lzma

import pytest

from lazily import Seq, seq
from lazily.io import (
    BZ2File,
    GZFile,
    JsonLinesFile,
    ReusableFile,
    XZFile,
    get_read_function,
    open_reusable,
)


LINES = ["alpha\n", "beta\n", "gamma\n"]


@pytest.fixture
def text_file(tmp_path):
    path = tmp_path / "lines.txt"
    path.write_text("".join(LINES))
    return str(path)


@pytest.fixture
def gz_file(tmp_path):
    path = tmp_path / "lines.txt.gz"
    with gzip.open(path, "wt") as handle:
        handle.write("".join(LINES))
    return str(path)


class TrackingFile(ReusableFile):
    """ReusableFile that keeps every handle it opens."""

    def __init__(self, *args, **kwargs):
        super(TrackingFile, self).__init__(*args, **kwargs)
        self.handles = []

    def _open(self):
        handle = super(TrackingFile, self)._open()
        self.handles.append(handle)
        return handle


class TestReadFunction:
    """Compression detection"""

    def test_plain(self, text_file):
        assert get_read_function(text_file, False) is ReusableFile

    def test_gzip(self, gz_file):
        assert get_read_function(gz_file, False) is GZFile
        assert get_read_function(gz_file, True) is ReusableFile

    def test_bz2_and_xz(self, tmp_path):
        bz_path = tmp_path / "lines.bz2"
        bz_path.write_bytes(bz2.compress(b"x\n"))
        xz_path = tmp_path / "lines.xz"
        xz_path.write_bytes(lzma.compress(b"x\n"))

        assert get_read_function(str(bz_path), False) is BZ2File
        assert get_read_function(str(xz_path), False) is XZFile

    def test_compressed_readers_open_in_text_mode(self, gz_file):
        reader = open_reusable(gz_file)
        assert isinstance(reader, GZFile)
        assert reader.mode == "rt"
        assert list(reader) == LINES

    def test_compressed_readers_open_in_binary_mode(self, gz_file):
        reader = open_reusable(gz_file, mode="rb")
        assert isinstance(reader, GZFile)
        assert list(reader) == [line.encode() for line in LINES]

    def test_plain_reader_in_binary_mode(self, text_file):
        assert list(open_reusable(text_file, mode="rb")) == [line.encode() for line in LINES]


class TestFileSequences:
    """seq.open(), seq.jsonl() and seq.csv()"""

    @pytest.mark.asyncio
    async def test_open_is_restartable(self, text_file):
        lines = seq.open(text_file)
        assert await lines.to_array() == LINES
        assert await lines.map(lambda line, *_: line.strip()).to_array() == ["alpha", "beta", "gamma"]

    @pytest.mark.asyncio
    async def test_open_gzip(self, gz_file):
        assert await seq.open(gz_file).to_array() == LINES

    @pytest.mark.asyncio
    async def test_open_xz(self, tmp_path):
        path = tmp_path / "lines.xz"
        with lzma.open(path, "wt") as handle:
            handle.write("".join(LINES))
        assert await seq.open(str(path)).last() == "gamma\n"

    def test_open_requires_read_mode(self, text_file):
        with pytest.raises(ValueError):
            seq.open(text_file, mode="w")

    @pytest.mark.asyncio
    async def test_early_stop_closes_file(self, text_file):
        source = TrackingFile(text_file)
        assert await Seq.of(source).first() == "alpha\n"
        assert len(source.handles) == 1
        assert source.handles[0].closed

    @pytest.mark.asyncio
    async def test_each_traversal_opens_its_own_handle(self, text_file):
        source = TrackingFile(text_file)
        lines = Seq.of(source)
        await lines.to_array()
        await lines.slice(0, 1).to_array()
        assert len(source.handles) == 2
        assert all(handle.closed for handle in source.handles)

    @pytest.mark.asyncio
    async def test_jsonl(self, tmp_path):
        path = tmp_path / "records.jsonl"
        path.write_text('{"id": 1, "tags": ["a"]}\n\n{"id": 2, "tags": []}\n')

        records = seq.jsonl(str(path))
        assert await records.map(lambda record, *_: record["id"]).to_array() == [1, 2]
        assert await records.first() == {"id": 1, "tags": ["a"]}

    @pytest.mark.asyncio
    async def test_jsonl_gzip(self, tmp_path):
        path = tmp_path / "records.jsonl.gz"
        with gzip.open(path, "wt") as handle:
            handle.write('{"id": 1}\n{"id": 2}\n')
        assert await seq.jsonl(str(path)).reduce(lambda acc, r, *_: acc + r["id"], 0) == 3

    @pytest.mark.asyncio
    async def test_jsonl_malformed_line_aborts(self, tmp_path):
        path = tmp_path / "broken.jsonl"
        path.write_text('{"id": 1}\n{"id": \n')
        with pytest.raises(Exception):
            await seq(JsonLinesFile(str(path))).to_array()

    @pytest.mark.asyncio
    async def test_csv(self, tmp_path):
        path = tmp_path / "table.csv"
        path.write_text("name,count\nfoo,1\nbar,2\n")

        rows = seq.csv(str(path)).slice(1)
        assert await rows.to_array() == [["foo", "1"], ["bar", "2"]]
        assert await rows.map(lambda row, *_: int(row[1])).reduce(lambda acc, n, *_: acc + n, 0) == 3

    @pytest.mark.asyncio
    async def test_tsv(self, tmp_path):
        path = tmp_path / "table.tsv"
        path.write_text("a\tb\n")
        assert await seq.csv(str(path), delimiter="\t").to_array() == [["a", "b"]]
