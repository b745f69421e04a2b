from __future__ import annotations

import re

# Release versions
VERSION_LENGTH = 7
# ECR image tag grammar
TAG_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]{0,127}$")

# Placeholders used when dry-run skips AWS lookups
DRY_RUN_ACCOUNT_ID = "000000000000"
DRY_RUN_REVISION = 999

LIST_VERSIONS_LIMIT = 10

REQUIRED_TOOLS: tuple[str, ...] = ("docker", "aws", "git")

# Fields ECS assigns on register-task-definition. They appear in
# describe-task-definition output and are rejected as register input.
PLATFORM_ASSIGNED_FIELDS: frozenset[str] = frozenset(
    {
        "taskDefinitionArn",
        "revision",
        "status",
        "requiresAttributes",
        "compatibilities",
        "registeredAt",
        "registeredBy",
        "deregisteredAt",
    }
)

# Top-level parameters accepted by `aws ecs register-task-definition --cli-input-json`.
REGISTER_INPUT_FIELDS: frozenset[str] = frozenset(
    {
        "family",
        "taskRoleArn",
        "executionRoleArn",
        "networkMode",
        "containerDefinitions",
        "volumes",
        "placementConstraints",
        "requiresCompatibilities",
        "cpu",
        "memory",
        "tags",
        "pidMode",
        "ipcMode",
        "proxyConfiguration",
        "inferenceAccelerators",
        "ephemeralStorage",
        "runtimePlatform",
        "enableFaultInjection",
    }
)
