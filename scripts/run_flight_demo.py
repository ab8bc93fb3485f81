#!/usr/bin/env python3
"""
Run a headless ship-flight simulation.

Usage:
    python scripts/run_flight_demo.py
    python scripts/run_flight_demo.py --launch planet:home moon:luna --launch planet:inner asteroid:ceres
    python scripts/run_flight_demo.py --retarget-at 6 --retarget-to planet:outer --json
"""

import argparse
import json
import logging
import math
import sys
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shipflight.bodies import BodyRef
from shipflight.clock import FrameTimer, SimulationClock
from shipflight.config import SimulationConfig
from shipflight.scenarios import create_demo_system, load_system
from shipflight.simulation import FlightSimulation


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run a headless ship-flight simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/run_flight_demo.py --duration 30 --fps 60
    python scripts/run_flight_demo.py --system systems/demo.json --config flight.json
    python scripts/run_flight_demo.py --time-scale 4 --log-level DEBUG
        """,
    )

    # Setup
    parser.add_argument(
        "--system",
        help="JSON solar system file (default: built-in demo system)",
    )
    parser.add_argument(
        "--config",
        help="JSON simulation config file (default: built-in defaults)",
    )
    parser.add_argument(
        "--launch",
        nargs=2,
        action="append",
        metavar=("ORIGIN", "DESTINATION"),
        help="Launch a ship, bodies as kind:id (repeatable; default: planet:home moon:luna)",
    )

    # Retarget
    parser.add_argument(
        "--retarget-at",
        type=float,
        help="Simulated time at which the first ship is retargeted",
    )
    parser.add_argument(
        "--retarget-to",
        default="planet:outer",
        help="New destination for the retarget, as kind:id (default: planet:outer)",
    )

    # Timing
    parser.add_argument(
        "--duration",
        type=float,
        default=20.0,
        help="Host seconds to run; simulated time is this times --time-scale (default: 20)",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=60.0,
        help="Host frame rate driving the simulation (default: 60)",
    )
    parser.add_argument(
        "--time-scale",
        type=float,
        default=1.0,
        help="Simulated seconds per host second, 0 pauses the clock (default: 1)",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Sleep between frames instead of running as fast as possible",
    )

    # Output
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON summary instead of status lines",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        system = load_system(args.system) if args.system else create_demo_system()
        config = SimulationConfig.from_json(args.config) if args.config else SimulationConfig()
        launches = args.launch or [["planet:home", "moon:luna"]]
        launches = [(BodyRef.parse(o), BodyRef.parse(d)) for o, d in launches]
        retarget_to = BodyRef.parse(args.retarget_to)
        if args.fps <= 0:
            raise ValueError(f"--fps must be positive, got {args.fps}")
        clock = SimulationClock(time_scale=args.time_scale)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Frame-driven timer so throttling follows the emulated frame clock
    frame_dt = 1.0 / args.fps
    frame_count = max(0, math.ceil(args.duration * args.fps))
    frame_clock = {"now": 0.0}
    sim = FlightSimulation(config=config, timer=lambda: frame_clock["now"])

    ship_ids = []
    for origin, destination in launches:
        ship_id = sim.launch(origin, destination, system, clock.now())
        if ship_id is None:
            print(f"Could not launch {origin} -> {destination}", file=sys.stderr)
            continue
        ship_ids.append(ship_id)

    if not ship_ids:
        print("Error: no ship could be launched", file=sys.stderr)
        return 1

    if not args.json:
        for event in sim.events:
            print(event)

    wall = FrameTimer()
    retargeted = args.retarget_at is None
    next_report = 1.0
    history = []

    # Bounded by host frames so a paused clock still terminates
    for _ in range(frame_count):
        frame_clock["now"] += frame_dt
        clock.advance(frame_dt)

        if not retargeted and clock.now() >= args.retarget_at:
            sim.retarget(ship_ids[0], retarget_to, system, clock.now())
            retargeted = True

        for event in sim.tick(system, clock.now()):
            if not args.json:
                print(event)

        if clock.now() >= next_report:
            next_report += 1.0
            for ship in sim.list_active_ships():
                progress = sim.get_flight_progress(ship.ship_id, clock.now())
                row = {
                    "t": round(clock.now(), 3),
                    "ship": ship.ship_id,
                    "state": ship.state.value,
                    "progress": round(progress or 0.0, 3),
                    "position": [round(c, 4) for c in ship.position.to_tuple()],
                }
                history.append(row)
                if not args.json:
                    x, y, z = row["position"]
                    print(f"  t={row['t']:6.2f} {ship.ship_id} {ship.state.value:<9} "
                          f"{row['progress'] * 100:5.1f}%  ({x:.3f}, {y:.3f}, {z:.3f})")

        if args.realtime:
            elapsed = wall.tick()
            if elapsed < frame_dt:
                time.sleep(frame_dt - elapsed)
            wall.tick()

    if args.json:
        summary = {
            "system": system.system_id,
            "duration": clock.now(),
            "frames": frame_count,
            "ships": [
                {
                    "id": ship.ship_id,
                    "origin": str(ship.origin),
                    "destination": str(ship.destination),
                    "state": ship.state.value,
                    "estimated_flight_time": ship.total_flight_time_estimate,
                    "trail_length": len(ship.trail),
                }
                for ship in sim.list_active_ships()
            ],
            "events": [str(e) for e in sim.events],
            "history": history,
        }
        print(json.dumps(summary, indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
