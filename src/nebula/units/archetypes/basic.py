from nebula.units.base import AgentStats, AgentType, DropTable


class Basic(AgentType):
    type_id = "basic"
    display_name = "Drifter"
    size = 14.0
    hue = 0.0
    unlock_wave = 1
    spawn_weight = 2
    stats = AgentStats(
        health=1.0, speed_mult=1.0,
        kill_score=18, combo_gain=2, core_damage=10.0,
    )
    drops = DropTable(count=1, value=6.0)
