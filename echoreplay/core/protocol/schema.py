"""
Snapshot Schema - Pydantic 比赛快照模式定义

对应回放文件每一行 JSON 的完整结构。
- 所有字段均可缺失，缺失在任何层级都保持为 None，不补零
- 三维向量在读取时转换为引擎空间（见 vectors.py）
- 变换字段在读取时统一归一化（见 transforms.py），无法识别的变换仅该字段置为 None
- 允许额外字段（兼容新版 API）
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from .transforms import Transform, try_resolve_transform
from .vectors import Vec3, Vector3


class TeamColor(str, Enum):
    """队伍颜色，按 teams 数组下标区分"""

    BLUE = "blue"
    ORANGE = "orange"
    SPECTATOR = "spectator"

    @classmethod
    def from_index(cls, index: int) -> "TeamColor":
        if index == 0:
            return cls.BLUE
        if index == 1:
            return cls.ORANGE
        return cls.SPECTATOR


class Stats(BaseModel):
    """玩家 / 队伍统计数据"""

    model_config = {"extra": "allow"}

    possession_time: Optional[float] = Field(default=None, description="控盘时间（秒）")
    points: Optional[int] = Field(default=None, description="得分")
    goals: Optional[int] = Field(default=None, description="进球")
    saves: Optional[int] = Field(default=None, description="扑救")
    stuns: Optional[int] = Field(default=None, description="击晕")
    interceptions: Optional[int] = Field(default=None, description="拦截")
    blocks: Optional[int] = Field(default=None, description="格挡")
    passes: Optional[int] = Field(default=None, description="传球")
    catches: Optional[int] = Field(default=None, description="接球")
    steals: Optional[int] = Field(default=None, description="抢断")
    assists: Optional[int] = Field(default=None, description="助攻")
    shots_taken: Optional[int] = Field(default=None, description="射门次数")

    def summary(self) -> str:
        """格式化为多行文本"""
        possession = (
            f"{self.possession_time:,.0f}" if self.possession_time is not None else "-"
        )
        rows = [
            ("Possession Time", possession),
            ("Points", self.points),
            ("Goals", self.goals),
            ("Saves", self.saves),
            ("Stuns", self.stuns),
            ("Assists", self.assists),
            ("Shots Taken", self.shots_taken),
        ]
        return "\n".join(f"{label}: {'-' if value is None else value}" for label, value in rows)


class LastScore(BaseModel):
    """最近一次进球信息"""

    model_config = {"extra": "allow"}

    disc_speed: Optional[float] = Field(default=None, description="进球时飞盘速度")
    team: Optional[str] = Field(default=None, description="得分队伍")
    goal_type: Optional[str] = Field(default=None, description="进球类型")
    point_amount: Optional[int] = Field(default=None, description="得分值")
    distance_thrown: Optional[float] = Field(default=None, description="投掷距离")
    person_scored: Optional[str] = Field(default=None, description="进球玩家")
    assist_scored: Optional[str] = Field(default=None, description="助攻玩家")


class Disc(BaseModel):
    """飞盘状态"""

    model_config = {"extra": "allow"}

    position: Optional[Vec3] = Field(default=None, description="位置")
    forward: Optional[Vec3] = Field(default=None, description="朝向基 forward")
    left: Optional[Vec3] = Field(default=None, description="朝向基 left")
    up: Optional[Vec3] = Field(default=None, description="朝向基 up")
    velocity: Optional[Vec3] = Field(default=None, description="速度")
    bounce_count: Optional[int] = Field(default=None, description="反弹次数")


class Playspace(BaseModel):
    """录制者的 VR 追踪空间"""

    model_config = {"extra": "allow"}

    vr_left: Optional[Vec3] = Field(default=None)
    vr_position: Optional[Vec3] = Field(default=None)
    vr_forward: Optional[Vec3] = Field(default=None)
    vr_up: Optional[Vec3] = Field(default=None)


class Player(BaseModel):
    """玩家状态

    新版 API 使用 head / body / lhand / rhand 变换；
    旧版 API 只有扁平的 position / forward / left / up，保留用于兼容。
    """

    model_config = {"extra": "allow"}

    # 身份
    playerid: Optional[int] = Field(default=None, description="场内玩家编号")
    name: Optional[str] = Field(default=None, description="玩家名")
    userid: Optional[int] = Field(default=None, description="用户ID")
    number: Optional[int] = Field(default=None, description="球衣号码")
    level: Optional[int] = Field(default=None, description="等级")
    ping: Optional[int] = Field(default=None, description="延迟")
    stats: Optional[Stats] = Field(default=None, description="统计")

    # 状态标志
    stunned: Optional[bool] = Field(default=None, description="是否被击晕")
    invulnerable: Optional[bool] = Field(default=None, description="是否无敌")
    blocking: Optional[bool] = Field(default=None, description="是否格挡")
    possession: Optional[bool] = Field(default=None, description="是否持盘")

    velocity: Optional[Vec3] = Field(default=None, description="速度")

    # 变换
    head: Optional[Transform] = Field(default=None, description="头部")
    body: Optional[Transform] = Field(default=None, description="身体")
    lhand: Optional[Transform] = Field(default=None, description="左手")
    rhand: Optional[Transform] = Field(default=None, description="右手")

    # 旧版 API
    position: Optional[Vec3] = Field(default=None, description="旧版头部位置")
    forward: Optional[Vec3] = Field(default=None)
    left: Optional[Vec3] = Field(default=None)
    up: Optional[Vec3] = Field(default=None)

    @field_validator("head", "body", "lhand", "rhand", mode="before")
    @classmethod
    def resolve_transforms(cls, v: Any, info: ValidationInfo) -> Optional[Transform]:
        return try_resolve_transform(v, info.field_name)

    @property
    def head_transform(self) -> Optional[Transform]:
        """头部变换，旧版数据从扁平字段组装"""
        if self.head is not None:
            return self.head
        return Transform.from_legacy(self.position, self.forward, self.left, self.up)

    @property
    def world_position(self) -> Optional[Vector3]:
        """身体位置，旧版数据使用扁平 position"""
        if self.body is not None and self.body.position is not None:
            return self.body.position
        return self.position

    @property
    def left_hand(self) -> Optional[Transform]:
        return self.lhand

    @property
    def right_hand(self) -> Optional[Transform]:
        return self.rhand


class Team(BaseModel):
    """队伍状态"""

    model_config = {"extra": "allow"}

    players: Optional[List[Player]] = Field(default=None, description="队员列表（有序）")
    team: Optional[str] = Field(default=None, description="队伍名称")
    possession: Optional[bool] = Field(default=None, description="是否持盘")
    stats: Optional[Stats] = Field(default=None, description="队伍统计")


class Snapshot(BaseModel):
    """某一时刻的完整比赛状态"""

    model_config = {"extra": "allow", "populate_by_name": True}

    # 解析附加信息，不属于 API 数据
    frame_time: Optional[datetime] = Field(default=None, exclude=True, description="录制时间")
    original_json: Optional[str] = Field(
        default=None, exclude=True, repr=False, description="原始 JSON 文本"
    )
    line_number: Optional[int] = Field(
        default=None, exclude=True, description="源文件行号（从 0 开始，丢弃不影响）"
    )

    disc: Optional[Disc] = Field(default=None, description="飞盘")
    sessionid: Optional[str] = Field(default=None, description="会话ID")
    sessionip: Optional[str] = Field(default=None, description="服务器地址")
    game_status: Optional[str] = Field(default=None, description="比赛阶段")
    game_clock_display: Optional[str] = Field(default=None, description="显示用比赛时钟")
    game_clock: Optional[float] = Field(default=None, description="剩余时间（秒）")
    match_type: Optional[str] = Field(default=None, description="比赛类型")
    map_name: Optional[str] = Field(default=None, description="地图")
    client_name: Optional[str] = Field(default=None, description="录制者用户名")
    playspace: Optional[Playspace] = Field(default=None, alias="player", description="VR 追踪空间")
    orange_points: Optional[int] = Field(default=None, description="橙队得分")
    blue_points: Optional[int] = Field(default=None, description="蓝队得分")
    private_match: Optional[bool] = Field(default=None)
    tournament_match: Optional[bool] = Field(default=None)
    orange_team_restart_request: Optional[bool] = Field(default=None)
    blue_team_restart_request: Optional[bool] = Field(default=None)
    possession: Optional[List[int]] = Field(default=None, description="持盘 [队伍, 玩家]")
    last_score: Optional[LastScore] = Field(default=None, description="最近进球")
    teams: Optional[List[Team]] = Field(default=None, description="队伍列表（有序）")

    def players(self) -> Iterator[Tuple[int, Player]]:
        """遍历所有队伍的玩家，返回 (队伍下标, 玩家)"""
        for team_index, team in enumerate(self.teams or []):
            for player in team.players or []:
                yield team_index, player

    def iter_teams(self) -> Iterator[Tuple[TeamColor, Team]]:
        for index, team in enumerate(self.teams or []):
            yield TeamColor.from_index(index), team

    def to_wire_dict(self) -> Dict[str, Any]:
        """写回回放 JSON 结构（坐标轴换回，变换保持原编码）"""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
