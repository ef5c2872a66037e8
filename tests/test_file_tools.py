import pytest

from shell_agent.agent_core import FileReadTool, FileWriteTool, ToolInput
from shell_agent.agent_core.tools.builtin.file_read import LINE_TRUNCATION_MARKER, MAX_FILE_SIZE


def read_input(path: str, working_dir) -> ToolInput:
    return ToolInput(raw="", parsed={"path": path}, working_dir=str(working_dir))


def write_input(working_dir, **args) -> ToolInput:
    return ToolInput(raw="", parsed=args, working_dir=str(working_dir))


@pytest.mark.asyncio
async def test_read_file(tmp_path) -> None:
    (tmp_path / "notes.txt").write_text("hello\nworld\n")

    output = await FileReadTool().execute(read_input("notes.txt", tmp_path))

    assert output.success is True
    assert output.result == "hello\nworld\n"


@pytest.mark.asyncio
async def test_read_accepts_raw_path(tmp_path) -> None:
    target = tmp_path / "raw.txt"
    target.write_text("raw")

    output = await FileReadTool().execute(ToolInput.from_raw(f"  {target}  "))

    assert output.result == "raw"


@pytest.mark.asyncio
async def test_read_rejects_traversal(tmp_path) -> None:
    output = await FileReadTool().execute(read_input("../../../etc/passwd", tmp_path))

    assert output.success is False
    assert output.error == "path traversal not allowed"


@pytest.mark.asyncio
async def test_read_missing_file(tmp_path) -> None:
    output = await FileReadTool().execute(read_input("nope.txt", tmp_path))

    assert output.error == "file not found: nope.txt"


@pytest.mark.asyncio
async def test_read_directory(tmp_path) -> None:
    (tmp_path / "sub").mkdir()

    output = await FileReadTool().execute(read_input("sub", tmp_path))

    assert output.error == "sub is a directory, not a file"


@pytest.mark.asyncio
async def test_read_empty_path(tmp_path) -> None:
    output = await FileReadTool().execute(read_input("  ", tmp_path))

    assert output.error == "path cannot be empty"


@pytest.mark.asyncio
async def test_read_size_limit(tmp_path) -> None:
    (tmp_path / "big.txt").write_bytes(b"a" * (101 * 1024))
    (tmp_path / "small.txt").write_bytes(b"a" * (99 * 1024))

    too_big = await FileReadTool().execute(read_input("big.txt", tmp_path))
    fits = await FileReadTool().execute(read_input("small.txt", tmp_path))

    assert too_big.success is False
    assert too_big.error == f"file too large ({101 * 1024} bytes, max {MAX_FILE_SIZE} bytes)"
    assert fits.success is True
    assert len(fits.result) == 99 * 1024


@pytest.mark.asyncio
async def test_read_line_limit(tmp_path) -> None:
    (tmp_path / "lines.txt").write_text("".join(f"line {i}\n" for i in range(1500)))

    output = await FileReadTool().execute(read_input("lines.txt", tmp_path))

    lines = output.result.split("\n")
    assert output.success is True
    assert lines[0] == "line 0"
    assert lines[999] == "line 999"
    assert lines[1000] == LINE_TRUNCATION_MARKER
    assert len(lines) == 1001


@pytest.mark.asyncio
async def test_write_creates_file_and_parents(tmp_path) -> None:
    output = await FileWriteTool().execute(write_input(tmp_path, path="a/b/new.txt", content="hello"))

    assert output.success is True
    assert output.result == "Successfully created file: a/b/new.txt (5 bytes)"
    assert (tmp_path / "a" / "b" / "new.txt").read_text() == "hello"


@pytest.mark.asyncio
async def test_write_overwrites(tmp_path) -> None:
    (tmp_path / "f.txt").write_text("old content")

    output = await FileWriteTool().execute(write_input(tmp_path, path="f.txt", content="new"))

    assert output.result == "Successfully overwrote file: f.txt (3 bytes)"
    assert (tmp_path / "f.txt").read_text() == "new"


@pytest.mark.asyncio
async def test_write_appends(tmp_path) -> None:
    (tmp_path / "log.txt").write_text("one\n")

    output = await FileWriteTool().execute(write_input(tmp_path, path="log.txt", content="two\n", append=True))

    assert output.result == "Successfully appended to file: log.txt (4 bytes)"
    assert (tmp_path / "log.txt").read_text() == "one\ntwo\n"


@pytest.mark.asyncio
async def test_write_rejects_traversal(tmp_path) -> None:
    output = await FileWriteTool().execute(write_input(tmp_path, path="../escape.txt", content="x"))

    assert output.success is False
    assert output.error == "path traversal not allowed"
    assert not (tmp_path.parent / "escape.txt").exists()


@pytest.mark.asyncio
async def test_write_invalid_input(tmp_path) -> None:
    not_json = await FileWriteTool().execute(ToolInput.from_raw("just text", str(tmp_path)))
    missing = await FileWriteTool().execute(write_input(tmp_path, path="x.txt"))

    assert not_json.error.startswith("invalid input")
    assert missing.success is False
    assert "content" in missing.error


@pytest.mark.asyncio
async def test_write_to_directory_fails(tmp_path) -> None:
    (tmp_path / "d").mkdir()

    output = await FileWriteTool().execute(write_input(tmp_path, path="d", content="x"))

    assert output.error == "d is a directory, not a file"


def test_write_describe_call() -> None:
    tool = FileWriteTool()

    described = tool.describe_call(ToolInput.from_raw('{"path": "out.txt", "content": "abc", "append": true}'))

    assert described == "Append 3 bytes to out.txt"
    assert tool.describe_call(ToolInput.from_raw("garbage")) == "Execute file_write tool"
