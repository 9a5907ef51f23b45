"""Tests for the command line and message batches."""

import json
import logging

import pytest

from debug import Debug
from errors import EnigmaError
from main import Config, main, process

SETTINGS = "* B BETA III IV I AXLE (HQ) (EX) (IP) (TR) (BY)"


class TestProcess:
    """Message batches with settings lines."""

    def test_round_trip(self, naval):
        cipher = list(process([SETTINGS, "From his shoulder Hiawatha"], naval, Config()))
        assert len(cipher) == 1
        assert all(len(g) == 5 for g in cipher[0].split()[:-1])

        plain = list(process([SETTINGS, cipher[0]], naval, Config()))
        assert plain == ["FROMH ISSHO ULDER HIAWA THA"]

    def test_settings_line_resets_machine(self, naval):
        out = list(process([SETTINGS, "AAAAA", SETTINGS, "AAAAA"], naval, Config()))
        assert out[0] == out[1]

    def test_message_continues_across_lines(self, naval):
        split = list(process([SETTINGS, "AAAAA", "AAAAA"], naval, Config()))
        joined = list(process([SETTINGS, "AAAAAAAAAA"], naval, Config()))
        assert " ".join(split) == joined[0]

    def test_blank_lines_kept(self, naval):
        out = list(process(["", SETTINGS, "", "HELLO\n"], naval, Config()))
        assert out[:2] == ["", ""]
        assert len(out[2]) == 5

    def test_message_before_settings(self, naval):
        with pytest.raises(EnigmaError):
            list(process(["HELLO", SETTINGS], naval, Config()))

    def test_block_size(self, naval):
        out = list(process([SETTINGS, "HELLOWORLD"], naval, Config(block=4)))
        assert [len(g) for g in out[0].split()] == [4, 4, 2]


class TestMain:
    """The command line entry point."""

    def test_one_shot_round_trip(self, capsys):
        main(["-s", SETTINGS, "-m", "Hello world"])
        cipher = capsys.readouterr().out.strip()
        assert len(cipher.replace(" ", "")) == 10

        main(["-s", SETTINGS, "-m", cipher])
        assert capsys.readouterr().out.strip() == "HELLO WORLD"

    def test_enigma_i_catalog(self, capsys):
        main(["--catalog", "enigma-i", "-s", "* B I II III AAA", "-m", "AAAAA"])
        assert capsys.readouterr().out.strip() == "BDZGO"

    def test_batch_files(self, tmp_path):
        src = tmp_path / "in.txt"
        dst = tmp_path / "out.txt"
        src.write_text(f"{SETTINGS}\nHELLO WORLD\n", encoding="utf-8")
        main([str(src), str(dst)])

        back = tmp_path / "back.txt"
        cipher = dst.read_text(encoding="utf-8")
        src.write_text(f"{SETTINGS}\n{cipher}", encoding="utf-8")
        main([str(src), str(back)])
        assert back.read_text(encoding="utf-8") == "HELLO WORLD\n"

    def test_settings_flag_prefixes_batch(self, tmp_path, capsys):
        src = tmp_path / "in.txt"
        src.write_text("AAAAA\n", encoding="utf-8")
        main(["--catalog", "enigma-i", "-s", "* B I II III AAA", str(src)])
        assert capsys.readouterr().out == "BDZGO\n"

    def test_custom_catalog(self, tmp_path, capsys):
        path = tmp_path / "tiny.json"
        path.write_text(json.dumps({
            "alphabet": "ABCD",
            "slots": 2,
            "pawls": 1,
            "rotors": {
                "R": {"type": "reflector", "cycles": "(AC) (BD)"},
                "M": {"type": "moving", "cycles": "(ABCD)"},
            },
        }), encoding="utf-8")
        main(["--config", str(path), "-s", "* R M A", "-m", "ABCD"])
        cipher = capsys.readouterr().out.strip().replace(" ", "")
        main(["--config", str(path), "-s", "* R M A", "-m", cipher])
        assert capsys.readouterr().out.strip() == "ABCD"

    def test_pass_unknown(self, capsys):
        main(["--pass-unknown", "-s", SETTINGS, "-m", "HELLO,WORLD"])
        assert "," in capsys.readouterr().out

    def test_unknown_symbol_fails(self):
        with pytest.raises(SystemExit) as exc:
            main(["-s", SETTINGS, "-m", "HELLO,WORLD"])
        assert "Error" in str(exc.value.code)

    def test_bad_rotor_name_fails(self):
        with pytest.raises(SystemExit) as exc:
            main(["-s", "* B BETA III IV XI AXLE", "-m", "HELLO"])
        assert "XI" in str(exc.value.code)

    def test_message_needs_settings(self):
        with pytest.raises(SystemExit):
            main(["-m", "HELLO"])

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["--config", str(tmp_path / "nope.json"), "-s", SETTINGS, "-m", "A"])

    @pytest.mark.parametrize(
        "overrides",
        [
            {"rotors": [{"type": "moving", "cycles": "(ABCD)"}]},
            {"slots": "five"},
            {"alphabet": 26},
        ],
    )
    def test_malformed_config_exits_cleanly(self, tmp_path, overrides):
        data = {
            "alphabet": "ABCD",
            "slots": 2,
            "pawls": 1,
            "rotors": {
                "R": {"type": "reflector", "cycles": "(AC) (BD)"},
                "M": {"type": "moving", "cycles": "(ABCD)"},
            },
        }
        data.update(overrides)
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["--config", str(path), "-s", "* R M A", "-m", "AB"])
        assert str(exc.value.code).startswith("Error:")

    def test_unwritable_output_exits_cleanly(self, tmp_path):
        src = tmp_path / "in.txt"
        src.write_text(SETTINGS + "\nHELLO\n", encoding="utf-8")
        with pytest.raises(SystemExit):
            main([str(src), str(tmp_path / "missing" / "out.txt")])


class TestDebug:
    """Component logging switched on from the command line."""

    def test_components_off_by_default(self, naval, caplog):
        caplog.set_level(logging.DEBUG, logger="ENIGMA")
        list(process([SETTINGS, "HELLO"], naval, Config()))
        assert caplog.records == []

    def test_stepping_log(self, naval, caplog):
        caplog.set_level(logging.DEBUG, logger="ENIGMA")
        Debug().enable("stepping")
        list(process([SETTINGS, "HE"], naval, Config()))
        messages = [r.getMessage() for r in caplog.records]
        assert messages == ["[STEPPING] window AXLF", "[STEPPING] window AXLG"]

    def test_convert_log(self, naval, caplog):
        caplog.set_level(logging.DEBUG, logger="ENIGMA")
        Debug().enable("convert")
        list(process([SETTINGS, "A"], naval, Config()))
        assert len(caplog.records) == 1
        assert caplog.records[0].getMessage().startswith("[CONVERT] 'A' -> ")

    def test_global_switch(self, naval, caplog):
        caplog.set_level(logging.DEBUG, logger="ENIGMA")
        dbg = Debug()
        dbg.enable("rotor", "convert")
        dbg.toggle_global(False)
        list(process([SETTINGS, "HE"], naval, Config()))
        assert caplog.records == []

    def test_unknown_component(self):
        with pytest.raises(ValueError):
            Debug().enable("keyboard")
