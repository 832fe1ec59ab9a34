import subprocess
import sys
import tempfile
from pathlib import Path


def run_cli(*args: str, input: bytes | None = None) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "htmljson.cli", *args],
        input=input,
        capture_output=True,
    )


def test_cli_help():
    result = run_cli("--help")

    assert result.returncode == 0
    assert b"htmljson" in result.stdout
    assert b"escape" in result.stdout
    assert b"check" in result.stdout


def test_cli_escape_help():
    result = run_cli("escape", "--help")

    assert result.returncode == 0
    assert b"--chunk-size" in result.stdout
    assert b"--output" in result.stdout


def test_cli_escape_stdin():
    result = run_cli("escape", input=b'{"key":"greater than > "}')

    assert result.returncode == 0
    assert result.stdout == b'{"key":"greater than &gt; "}'


def test_cli_escape_small_chunks():
    raw = b'{"key":"ampersand \\' + b'u0026 and \\" quote"}'
    result = run_cli("escape", "--chunk-size", "1", input=raw)

    assert result.returncode == 0
    assert result.stdout == b'{"key":"ampersand &amp; and &quot; quote"}'


def test_cli_escape_file_to_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = Path(tmpdir) / "in.json"
        target = Path(tmpdir) / "out.json"
        source.write_bytes(b'[{"html":"<p>"}]')

        result = run_cli("escape", str(source), "--output", str(target))

        assert result.returncode == 0
        assert result.stdout == b""
        assert target.read_bytes() == b'[{"html":"&lt;p&gt;"}]'


def test_cli_escape_missing_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = run_cli("escape", str(Path(tmpdir) / "missing.json"))

        assert result.returncode == 1
        assert b"No such file" in result.stderr


def test_cli_escape_rejects_bad_chunk_size():
    result = run_cli("escape", "--chunk-size", "0", input=b"{}")

    assert result.returncode != 0
    assert b"--chunk-size" in result.stderr


def test_cli_escape_unterminated_escape_is_written_at_end():
    result = run_cli("escape", input=b'"abc\\')

    assert result.returncode == 0
    assert result.stdout == b'"abc\\'


def test_cli_check_escaped():
    result = run_cli("check", "&lt;b&gt;")

    assert result.returncode == 0
    assert result.stdout.strip() == b"escaped"


def test_cli_check_not_escaped():
    result = run_cli("check", "<b>")

    assert result.returncode == 1
    assert result.stdout.strip() == b"not escaped"


def test_cli_no_command():
    result = run_cli()

    assert result.returncode == 1
    assert b"usage:" in result.stdout.lower()


def test_cli_escape_unwritable_output():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = Path(tmpdir) / "in.json"
        source.write_bytes(b"{}")
        target = Path(tmpdir) / "missing-dir" / "out.json"

        result = run_cli("escape", str(source), "--output", str(target))

        assert result.returncode == 1
        assert b"Cannot open file" in result.stderr
        assert b"Traceback" not in result.stderr
