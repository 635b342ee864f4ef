"""
Tests for the evaluate_bet command-line script
Run with: pytest tests/test_evaluate_bet_cli.py -v
"""

import json

import pytest

from scripts.evaluate_bet import main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every case against the house defaults"""
    for name in (
        "EDGERUNNER_DEFAULT_BANKROLL",
        "EDGERUNNER_DEFAULT_PRESET",
        "EDGERUNNER_DISPLAY_PLACES",
    ):
        monkeypatch.delenv(name, raising=False)


class TestEvaluateBetCli:

    def test_ticket(self, capsys):
        assert main(["2.0", "--prob", "0.6", "--bankroll", "1000", "--kelly", "half"]) == 0

        out = capsys.readouterr().out
        assert "Odds: 2.000 | +100 | 1/1" in out
        assert "Recommended stake: 100.00" in out

    def test_json_output(self, capsys):
        assert main(["+150", "--prob", "0.5", "--bankroll", "200", "--kelly", "1", "--json"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["decimal_odds"] == pytest.approx(2.5)
        # f* = (1.5 * 0.5 - 0.5) / 1.5
        assert payload["recommended_stake"] == pytest.approx(200 / 6)
        assert payload["display"]["odds"]["american"] == "+150"

    def test_negative_american_positional(self, capsys):
        assert main(["-200", "--prob", "0.5", "--kelly", "full", "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["recommended_stake"] == 0.0

    def test_defaults_from_environment(self, capsys, monkeypatch):
        monkeypatch.setenv("EDGERUNNER_DEFAULT_BANKROLL", "500")
        monkeypatch.setenv("EDGERUNNER_DEFAULT_PRESET", "quarter")

        assert main(["2.0", "--prob", "0.6", "--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["bankroll"] == 500.0
        assert payload["recommended_stake"] == pytest.approx(25.0)

    def test_market_probability(self, capsys):
        assert main(["--market-prob", "0.6", "--side", "opposite",
                     "--prob", "0.5", "--kelly", "full", "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["decimal_odds"] == pytest.approx(2.5)

    def test_json_has_no_infinite_fair_odds(self, capsys):
        assert main(["2.0", "--prob", "1e-320", "--json"]) == 0

        out = capsys.readouterr().out
        assert "Infinity" not in out
        assert json.loads(out)["fair_decimal_odds"] is None

    def test_explicit_format(self, capsys):
        assert main(["150", "--format", "american", "--prob", "0.5", "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["decimal_odds"] == pytest.approx(2.5)

    @pytest.mark.parametrize("argv, kind", [
        (["1.0", "--prob", "0.6"], "InvalidOdds"),
        (["2.0", "--prob", "1.2"], "InvalidProbability"),
        (["2.0", "--prob", "0.6", "--bankroll", "-5"], "InvalidBankroll"),
        (["2.0", "--prob", "0.6", "--kelly", "double"], "InvalidInput"),
    ])
    def test_rejected_input(self, capsys, argv, kind):
        assert main(argv) == 1
        assert capsys.readouterr().err.startswith(f"{kind}:")

    def test_bad_configuration(self, capsys, monkeypatch):
        monkeypatch.setenv("EDGERUNNER_DISPLAY_PLACES", "many")

        assert main(["2.0", "--prob", "0.6"]) == 2
        assert "Configuration error" in capsys.readouterr().err

    @pytest.mark.parametrize("argv", [
        ["--prob", "0.6"],
        ["2.0", "--market-prob", "0.5", "--prob", "0.6"],
    ])
    def test_requires_exactly_one_price(self, argv):
        with pytest.raises(SystemExit) as excinfo:
            main(argv)
        assert excinfo.value.code == 2
