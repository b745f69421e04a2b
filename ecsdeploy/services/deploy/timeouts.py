from __future__ import annotations

# aws API calls (sts, ecr describe, ecs describe/register/update)
AWS_TIMEOUT_SECONDS = 60.0

# docker login; build and push have no client-side limit
DOCKER_LOGIN_TIMEOUT_SECONDS = 60.0

# `aws ecs wait services-stable` is bounded by the waiter itself
STABILIZATION_TIMEOUT_SECONDS: float | None = None

# Idempotent aws read retry policy
AWS_READ_RETRY_ATTEMPTS = 3
AWS_READ_RETRY_DELAY_SECONDS = 1.0
