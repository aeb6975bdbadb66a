from nebula.units.base import AgentStats, AgentType, DropTable


class Swarm(AgentType):
    """Swarmling -- arrives in numbers from wave 5 onward.

    Tiny and brittle; worth little on its own, so its combo gain is the
    lowest of all archetypes.
    """
    type_id = "swarm"
    display_name = "Swarmling"
    size = 8.0
    hue = 160.0
    unlock_wave = 5
    spawn_weight = 3
    stats = AgentStats(
        health=0.4, speed_mult=1.25,
        kill_score=8, combo_gain=1, core_damage=4.0,
    )
    drops = DropTable(count=1, value=3.0)
