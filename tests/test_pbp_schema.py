from __future__ import annotations

import unittest

from gamewatch.pbp.schema import GameSnapshot, PlayByPlayBundle

from support import make_bundle


class PlayByPlayBundleTests(unittest.TestCase):
    def test_game_code_is_visiting_then_home_tricode(self) -> None:
        bundle = make_bundle(visiting="BOS", home="LAL")

        self.assertEqual("BOSLAL", bundle.game_code)

    def test_decodes_flattened_wire_format(self) -> None:
        bundle = PlayByPlayBundle.model_validate(
            {
                "gameId": "0012300001",
                "startTimeUTC": "2024-01-05T00:30:00Z",
                "vTeam": {"teamId": "1", "triCode": "BOS"},
                "hTeam": {"teamId": "2", "triCode": "LAL"},
                "period": {"current": 3},
                "isGameActivated": True,
                "unknownField": "ignored",
                "plays": [
                    {
                        "clock": "05:12",
                        "description": "Tatum 3pt Shot: Made",
                        "personId": "1628369",
                        "teamId": "1",
                        "vTeamScore": "70",
                        "hTeamScore": "68",
                        "isScoreChange": True,
                        "formatted": {"description": "Tatum hits a three"},
                    },
                    {"clock": "04:50", "description": "Timeout"},
                ],
            }
        )

        self.assertEqual("0012300001", bundle.id)
        self.assertEqual(3, bundle.period.current)
        self.assertTrue(bundle.active)
        self.assertEqual(["05:12", "04:50"], [play.clock for play in bundle.plays])
        first = bundle.plays[0]
        self.assertEqual("1628369", first.person_id)
        self.assertEqual("70", first.visiting_team_score)
        self.assertEqual("68", first.home_team_score)
        self.assertTrue(first.is_score_change)
        self.assertEqual("Tatum hits a three", first.formatted.description)
        self.assertFalse(bundle.plays[1].is_score_change)

    def test_to_wire_uses_upstream_keys(self) -> None:
        wire = make_bundle(active=False, plays=["a", "b"]).to_wire()

        self.assertEqual("BOS", wire["vTeam"]["triCode"])
        self.assertFalse(wire["isGameActivated"])
        self.assertEqual(1, wire["period"]["Current"])
        self.assertEqual(["a", "b"], [play["description"] for play in wire["Plays"]])
        self.assertIn("vTeamScore", wire["Plays"][0])

    def test_snapshot_drops_plays(self) -> None:
        bundle = make_bundle(plays=["a", "b"])

        snapshot = bundle.snapshot()

        self.assertIs(GameSnapshot, type(snapshot))
        self.assertEqual(bundle.game_code, snapshot.game_code)
        self.assertEqual(bundle.active, snapshot.active)
        self.assertEqual(bundle.start_time_utc, snapshot.start_time_utc)

    def test_game_date_uses_us_eastern(self) -> None:
        # 00:30 UTC on Jan 5 is still Jan 4 in New York.
        bundle = make_bundle()

        self.assertEqual("20240104", bundle.game_date())

    def test_game_date_none_without_start_time(self) -> None:
        self.assertIsNone(GameSnapshot().game_date())


if __name__ == "__main__":
    unittest.main()
