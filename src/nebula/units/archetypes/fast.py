from nebula.units.base import AgentStats, AgentType, DropTable


class Fast(AgentType):
    """Small, quick raider -- fragile but hits the core first."""
    type_id = "fast"
    display_name = "Darter"
    size = 10.0
    hue = 35.0
    unlock_wave = 2
    spawn_weight = 2
    stats = AgentStats(
        health=0.7, speed_mult=1.5,
        kill_score=12, combo_gain=2, core_damage=6.0,
    )
    drops = DropTable(count=1, value=5.0)
