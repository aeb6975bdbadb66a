from nebula.units.base import AgentStats, AgentType, DropTable


class Tank(AgentType):
    """Slow heavy -- soaks force damage, big core hit, rich drops."""
    type_id = "tank"
    display_name = "Monolith"
    size = 22.0
    hue = 280.0
    unlock_wave = 3
    spawn_weight = 1
    stats = AgentStats(
        health=2.5, speed_mult=0.6,
        kill_score=30, combo_gain=3, core_damage=15.0,
    )
    drops = DropTable(count=3, value=8.0)
