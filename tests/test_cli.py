import pytest

from bbqrcodec import cli, receiver, sender
from bbqrcodec.decoder import Decoder
from bbqrcodec.models import ContentType, TransferEncoding


def test_send_print_then_receive_from_text(tmp_path, capsys):
    src = tmp_path / "labels.jsonl"
    src.write_bytes(b'{"type":"tx","ref":"abc","label":"rent"}\n' * 5)

    sender.main([str(src), "--print", "--type", "json", "--encoding", "Z", "--fragment-length", "24"])
    parts = capsys.readouterr().out.splitlines()
    assert len(parts) > 1
    assert all(p.startswith("B$ZJ") for p in parts)

    shuffled = tmp_path / "parts.txt"
    shuffled.write_text("\n".join(["noise"] + parts[::-1] + parts[:1]) + "\n", encoding="utf-8")
    out = tmp_path / "out" / "labels.jsonl"
    receiver.main(["--from-text", str(shuffled), "--output", str(out)])
    assert out.read_bytes() == src.read_bytes()
    assert "JSON payload restored" in capsys.readouterr().out


def test_receive_incomplete_raises(tmp_path):
    partial = tmp_path / "parts.txt"
    partial.write_text("B$2B0200MZXW\n", encoding="utf-8")
    with pytest.raises(RuntimeError, match="incomplete"):
        receiver.main(["--from-text", str(partial), "--output", str(tmp_path / "x.bin")])


def test_receive_failed_transfer_raises(tmp_path):
    bad = tmp_path / "parts.txt"
    bad.write_text("B$ZB0100\n", encoding="utf-8")
    with pytest.raises(RuntimeError, match="empty_payload"):
        receiver.main(["--from-text", str(bad), "--output", str(tmp_path / "x.bin")])


def test_feed_lines_stops_when_complete():
    decoder = Decoder()
    accepted = receiver.feed_lines(decoder, ["B$2B0100MZXW6YTBOI", "B$2B0100MZXW6YTBOI", "junk"])
    assert accepted == 1
    assert decoder.result().data == b"foobar"


def test_sender_arg_types():
    args = sender.build_arg_parser().parse_args(["x", "--type", "P", "--encoding", "hex"])
    assert args.type is ContentType.PSBT
    assert args.encoding is TransferEncoding.HEX
    with pytest.raises(SystemExit):
        sender.build_arg_parser().parse_args(["x", "--type", "nope"])


def test_sender_rejects_bad_fragment_length(tmp_path):
    src = tmp_path / "a.bin"
    src.write_bytes(b"abc")
    with pytest.raises(SystemExit):
        sender.main([str(src), "--print", "--fragment-length", "0"])


def test_sender_reports_budget(tmp_path, capsys):
    src = tmp_path / "big.bin"
    src.write_bytes(b"\xaa" * 648)
    with pytest.raises(SystemExit):
        sender.main([str(src), "--print", "--encoding", "H", "--fragment-length", "1"])
    assert "1296 parts" in capsys.readouterr().err


def test_cli_dispatch(tmp_path, capsys):
    src = tmp_path / "a.txt"
    src.write_bytes(b"foobar")
    cli.main(["send", str(src), "--print", "--type", "U", "--encoding", "2"])
    assert capsys.readouterr().out.strip() == "B$2U0100MZXW6YTBOI"
    with pytest.raises(SystemExit):
        cli.main(["bogus"])
    with pytest.raises(SystemExit):
        cli.main([])
