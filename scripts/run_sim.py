import argparse
import json
import logging
import pathlib
import sys

# Ensure repository root is on PYTHONPATH when running without installation.
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from swarmsim.config import load_config, build_simulator


def parse_triggers(values):
    return set(values or [])


def main():
    parser = argparse.ArgumentParser(description="Run a headless drone swarm training mission.")
    parser.add_argument("--config", type=pathlib.Path, help="Path to YAML config.")
    parser.add_argument("--steps", type=int, help="Override total simulation steps.")
    parser.add_argument("--dt", type=float, help="Override simulation timestep (seconds).")
    parser.add_argument("--seed", type=int, help="Seed for formations, obstacles and faults.")
    parser.add_argument("--log", type=pathlib.Path, help="Optional path to write the JSON event log.")
    parser.add_argument("--comm-failure-at", type=int, nargs="*", dest="comm_failure_at",
                        help="Steps at which to inject a communication failure.")
    parser.add_argument("--packet-loss-at", type=int, nargs="*", dest="packet_loss_at",
                        help="Steps at which to inject packet loss.")
    parser.add_argument("--node-failure-at", type=int, nargs="*", dest="node_failure_at",
                        help="Steps at which a random drone fails.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Echo mission events to stderr.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config(args.config)
    if args.steps is not None:
        cfg["steps"] = args.steps
    if args.dt is not None:
        cfg["dt"] = args.dt
    if args.seed is not None:
        cfg["seed"] = args.seed

    comm_at = parse_triggers(args.comm_failure_at)
    loss_at = parse_triggers(args.packet_loss_at)
    node_at = parse_triggers(args.node_failure_at)

    sim = build_simulator(cfg)
    sim.start()

    for step in range(cfg["steps"]):
        if step in comm_at:
            sim.inject_comm_failure()
        if step in loss_at:
            sim.inject_packet_loss()
        if step in node_at:
            sim.trigger_node_failure()
        sample = sim.step(cfg["dt"])
        if sample is not None:
            print(
                f"t={sample['t']:7.2f}s score={sample['mission_score']:3d} "
                f"formation={sample['formation']:5.1f} collision={sample['collision']:5.1f} "
                f"comm={sample['communication']:5.1f} coverage={sample['coverage_area']:.3f}km2"
            )

    final = sim.sample()
    print(f"Mission complete: score {final['mission_score']} with {sim.state.active_agents} drones active")

    if args.log:
        args.log.parent.mkdir(parents=True, exist_ok=True)
        with args.log.open("w") as f:
            json.dump({"events": sim.events.to_records(), "samples": list(sim.samples)}, f, indent=2)


if __name__ == "__main__":
    main()
