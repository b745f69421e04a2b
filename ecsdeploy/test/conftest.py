from __future__ import annotations

import json

import pytest

from ecsdeploy.core.result import Ok
from ecsdeploy.platform.fake_process import FakeProcess

ACCOUNT_ID = "123456789012"
HEAD_SHA = "abc123f"


def current_task_definition(*, revision: int = 41) -> dict[str, object]:
    """A describe-task-definition payload as ECS returns it."""
    return {
        "taskDefinition": {
            "taskDefinitionArn": (
                f"arn:aws:ecs:us-east-1:{ACCOUNT_ID}:task-definition/bia-tf:{revision}"
            ),
            "family": "bia-tf",
            "revision": revision,
            "status": "ACTIVE",
            "networkMode": "bridge",
            "containerDefinitions": [
                {
                    "name": "bia",
                    "image": f"{ACCOUNT_ID}.dkr.ecr.us-east-1.amazonaws.com/bia-app:0ld0ld0",
                    "memoryReservation": 400,
                    "portMappings": [{"containerPort": 8080, "hostPort": 0}],
                },
                {"name": "sidecar", "image": "public.ecr.aws/nginx/nginx:latest"},
            ],
            "requiresAttributes": [{"name": "com.amazonaws.ecs.capability.ecr-auth"}],
            "placementConstraints": [],
            "compatibilities": ["EXTERNAL", "EC2"],
            "registeredAt": "2024-05-01T10:00:00.000000-03:00",
            "registeredBy": f"arn:aws:iam::{ACCOUNT_ID}:user/deployer",
        }
    }


MUTATING_PREFIXES: tuple[tuple[str, ...], ...] = (
    ("docker", "build"),
    ("docker", "login"),
    ("docker", "push"),
    ("aws", "ecs", "register-task-definition"),
    ("aws", "ecs", "update-service"),
    ("aws", "ecs", "wait"),
)


@pytest.fixture
def fake_tools(monkeypatch: pytest.MonkeyPatch) -> FakeProcess:
    """git, docker and aws answering like a healthy account with bia-tf:41 active."""
    import ecsdeploy.git.repository as repository_mod
    import ecsdeploy.services.deploy.aws as aws_mod
    import ecsdeploy.services.deploy.deps as deps_mod
    import ecsdeploy.services.deploy.docker as docker_mod

    tools = FakeProcess()
    tools.on("git", "rev-parse", "--git-dir", result=Ok(".git\n"))
    tools.on("git", "rev-parse", "--short=7", "HEAD", result=Ok(f"{HEAD_SHA}\n"))
    tools.on("aws", "sts", "get-caller-identity", result=Ok(json.dumps({"Account": ACCOUNT_ID})))
    tools.on("aws", "ecr", "get-login-password", result=Ok("s3cr3t-password\n"))
    tools.on(
        "aws",
        "ecs",
        "describe-task-definition",
        result=Ok(json.dumps(current_task_definition())),
    )
    tools.on(
        "aws",
        "ecs",
        "register-task-definition",
        result=Ok(json.dumps({"taskDefinition": {"family": "bia-tf", "revision": 42}})),
    )
    tools.on("aws", "ecs", "update-service", result=Ok("{}"))
    tools.on("aws", "ecs", "wait", "services-stable", result=Ok(""))
    tools.on("docker", "build", result=Ok(""))
    tools.on("docker", "login", result=Ok("Login Succeeded\n"))
    tools.on("docker", "push", result=Ok(""))

    monkeypatch.setattr(repository_mod, "run_process", tools)
    monkeypatch.setattr(aws_mod, "run_process", tools)
    monkeypatch.setattr(docker_mod, "run_process", tools)
    monkeypatch.setattr(aws_mod, "sleep", lambda seconds: None)
    monkeypatch.setattr(deps_mod, "which", lambda tool: f"/usr/bin/{tool}")
    return tools


@pytest.fixture
def task_definition() -> dict[str, object]:
    """The active task definition document (inner ``taskDefinition``)."""
    payload = current_task_definition()
    doc = payload["taskDefinition"]
    assert isinstance(doc, dict)
    return doc


@pytest.fixture
def mutating_prefixes() -> tuple[tuple[str, ...], ...]:
    """Command prefixes that build, publish or change ECS state."""
    return MUTATING_PREFIXES
