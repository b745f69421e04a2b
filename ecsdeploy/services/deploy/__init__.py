"""Release and rollback workflow for ECS services.

Stages, leaves first:
- version: release identifier from git or --tag
- image: docker build, ECR login and push
- task_spec: derive and register a new task definition revision
- service_update: point the service at a revision and wait for stability
- rollback: re-deploy an already published version
- pipeline: compose the stages for a full or partial release
"""
