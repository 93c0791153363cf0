# Welcome to
# __________         __    __  .__                               __
# \______   \_____ _/  |__/  |_|  |   ____   ______ ____ _____  |  | __ ____
#  |    |  _/\__  \\   __\   __\  | _/ __ \ /  ___//    \\__  \ |  |/ // __ \
#  |    |   \ / __ \|  |  |  | |  |_\  ___/ \___ \|   |  \/ __ \|    <\  ___/
#  |________/(______/__|  |__| |____/\_____>______>___|__(______/__|__\\_____>
#
# Handlers for an A*-guided Battlesnake. The move logic lives in
# move_selector.py; this file only wires it to the four API calls.
# For more info see docs.battlesnake.com

import logging
import typing

from config import EngineConfig
from move_selector import decide_move

logger = logging.getLogger(__name__)


def load_engine_config() -> EngineConfig:
    """Settings from SNAKE_* variables; bad values fall back to the defaults."""
    try:
        return EngineConfig.from_env()
    except ValueError as e:
        logger.warning("Ignoring invalid SNAKE_* settings: %s", e)
        return EngineConfig()


ENGINE_CONFIG = load_engine_config()


# info is called when you create your Battlesnake on play.battlesnake.com
# and controls your Battlesnake's appearance
# TIP: If you open your Battlesnake URL in a browser you should see this data
def info() -> typing.Dict:
    print("INFO")

    return {
        "apiversion": "1",
        "author": "astar-snake",
        "color": "#3E338F",
        "head": "smile",
        "tail": "default",
    }


# start is called when your Battlesnake begins a game
def start(game_state: typing.Dict):
    print("GAME START")


# end is called when your Battlesnake finishes a game
def end(game_state: typing.Dict):
    print("GAME OVER\n")


# move is called on every turn and returns your next move
# Valid moves are "up", "down", "left", or "right"
# See https://docs.battlesnake.com/api/example-move for available data
def move(game_state: typing.Dict) -> typing.Dict:
    decision = decide_move(game_state, ENGINE_CONFIG)

    turn = game_state.get("turn") if isinstance(game_state, dict) else None
    print(f"MOVE {turn}: {decision.move} | Strategy: {decision.strategy}")
    return {"move": decision.move}


# Start server when `python main.py` is run
if __name__ == "__main__":
    from server import run_server

    run_server({"info": info, "start": start, "move": move, "end": end})
