"""
Schema Tests - 快照模式测试

测试内容：
1. 坐标轴互换在各层级生效
2. 混合变换编码的归一化
3. 缺失字段保持缺失
4. 写回原始结构
"""

import pytest

from echoreplay.core.protocol.schema import Player, Snapshot, Stats, TeamColor
from echoreplay.core.protocol.transforms import TransformEncoding
from echoreplay.core.protocol.vectors import Vector3


class TestSnapshotFields:
    """快照字段测试"""

    def test_disc_axis_swap(self, make_snapshot):
        """测试飞盘位置交换坐标轴"""
        snapshot = make_snapshot()
        assert snapshot.disc.position == Vector3(3.0, 2.0, 1.0)
        assert snapshot.disc.velocity == Vector3(4.0, -0.25, 0.5)
        assert snapshot.disc.bounce_count == 2

    def test_playspace_alias(self, make_snapshot):
        """测试 player 字段映射为 playspace"""
        snapshot = make_snapshot()
        assert snapshot.playspace is not None
        assert snapshot.playspace.vr_position == Vector3(-2.0, 1.5, 0.0)

    def test_scalars(self, make_snapshot):
        snapshot = make_snapshot()
        assert snapshot.game_status == "playing"
        assert snapshot.game_clock == pytest.approx(252.5)
        assert snapshot.blue_points == 5
        assert snapshot.orange_points == 3
        assert snapshot.possession == [0, 1]
        assert snapshot.last_score.person_scored == "alpha"

    def test_missing_fields_stay_absent(self, sample_payload, make_snapshot):
        """测试缺失字段不补零"""
        del sample_payload["disc"]
        del sample_payload["game_clock"]
        snapshot = make_snapshot(sample_payload)
        assert snapshot.disc is None
        assert snapshot.game_clock is None

    def test_extra_fields_allowed(self, sample_payload, make_snapshot):
        """测试新版 API 的未知字段被保留"""
        sample_payload["pause"] = {"paused_state": "unpaused"}
        snapshot = make_snapshot(sample_payload)
        assert snapshot.model_extra["pause"] == {"paused_state": "unpaused"}
        assert snapshot.to_wire_dict()["pause"] == {"paused_state": "unpaused"}


class TestPlayers:
    """玩家与变换测试"""

    def test_players_iteration(self, make_snapshot):
        snapshot = make_snapshot()
        names = [(team_index, p.name) for team_index, p in snapshot.players()]
        assert names == [(0, "alpha"), (0, "bravo"), (1, "charlie")]

    def test_mixed_encodings(self, make_snapshot):
        """测试同一帧内混合三种变换编码"""
        alpha, bravo = make_snapshot().teams[0].players
        assert alpha.head.encoding == TransformEncoding.POSITION_OBJECT
        assert alpha.lhand.encoding == TransformEncoding.POS_OBJECT
        assert bravo.rhand.encoding == TransformEncoding.ARRAY
        assert bravo.rhand.position == Vector3(6.2, 1.4, 4.2)
        assert bravo.rhand.has_basis is False

    def test_world_position(self, make_snapshot):
        bravo = make_snapshot().teams[0].players[1]
        assert bravo.world_position == Vector3(6.0, 1.5, 4.0)

    def test_bad_transform_degrades_only_that_field(self, sample_payload, make_snapshot):
        """测试无法识别的变换只影响该字段"""
        sample_payload["teams"][0]["players"][1]["rhand"] = "broken"
        bravo = make_snapshot(sample_payload).teams[0].players[1]
        assert bravo.rhand is None
        assert bravo.lhand is not None
        assert bravo.head is not None
        assert bravo.blocking is True

    def test_legacy_player(self):
        """测试旧版扁平字段"""
        player = Player.model_validate(
            {"name": "old", "position": [1.0, 2.0, 3.0], "forward": [0.0, 0.0, 1.0]}
        )
        head = player.head_transform
        assert head is not None
        assert head.position == Vector3(3.0, 2.0, 1.0)
        assert head.forward == Vector3(1.0, 0.0, 0.0)
        assert player.world_position == Vector3(3.0, 2.0, 1.0)

    def test_player_without_transforms(self):
        player = Player.model_validate({"name": "ghost"})
        assert player.head_transform is None
        assert player.world_position is None
        assert player.left_hand is None and player.right_hand is None


class TestTeams:
    """队伍测试"""

    def test_team_colors(self, make_snapshot):
        colors = [color for color, _ in make_snapshot().iter_teams()]
        assert colors == [TeamColor.BLUE, TeamColor.ORANGE]

    @pytest.mark.parametrize(
        "index,color",
        [(0, TeamColor.BLUE), (1, TeamColor.ORANGE), (2, TeamColor.SPECTATOR)],
    )
    def test_from_index(self, index, color):
        assert TeamColor.from_index(index) == color

    def test_stats_summary(self, make_snapshot):
        summary = make_snapshot().teams[0].stats.summary()
        assert "Possession Time: 61" in summary
        assert "Points: 5" in summary
        assert "Shots Taken: 6" in summary

    def test_stats_summary_missing(self):
        summary = Stats().summary()
        assert "Points: -" in summary
        assert "Possession Time: -" in summary


class TestWireFormat:
    """写回原始结构测试"""

    def test_round_trip(self, sample_payload, make_snapshot):
        """测试解析后写回与原始结构一致"""
        snapshot = make_snapshot(sample_payload)
        assert snapshot.to_wire_dict() == sample_payload

    def test_attached_fields_not_serialized(self, make_snapshot):
        wire = make_snapshot().to_wire_dict()
        assert "frame_time" not in wire
        assert "original_json" not in wire
        assert "line_number" not in wire
        assert "player" in wire and "playspace" not in wire

    def test_to_json_parses_back(self, make_snapshot):
        snapshot = make_snapshot()
        again = Snapshot.model_validate_json(snapshot.to_json())
        assert again.disc.position == snapshot.disc.position
        assert again.teams[0].players[1].rhand.encoding == TransformEncoding.ARRAY
