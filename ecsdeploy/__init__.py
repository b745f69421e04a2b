"""ecsdeploy - build, publish and roll container images onto ECS services."""

__version__ = "1.0.0"
