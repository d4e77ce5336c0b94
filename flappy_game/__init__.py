"""
Flappy Game Package
===================

A side-scrolling flappy-bird game built around a headless simulation core.
The package contains:

- The deterministic tick loop (bird kinematics, pipe spawning, collisions)
- Scoring and the not_started / running / over phase machine
- Game events consumed by the synthesized audio
- Solid (numpy) and full (pygame) renderers
- A Gymnasium environment for agents

All tunable parameters are in game_config.yaml.
"""
