"""
CDK app entrypoint for the TickSolve API.

Every resource is tagged with the project and environment so per-stage costs can be filtered.
"""

import aws_cdk as cdk

from infrastructure.config.settings import Settings
from infrastructure.main_stack import TickSolveStack


def main() -> None:
    app = cdk.App()
    settings = Settings.from_environment()

    stack = TickSolveStack(
        app,
        f"TickSolveStack-{settings.environment}",
        settings=settings,
        env=cdk.Environment(
            account=app.node.try_get_context("account"),
            region=settings.aws_region,
        ),
    )
    cdk.Tags.of(stack).add("project", "ticksolve")
    cdk.Tags.of(stack).add("environment", settings.environment)

    app.synth()


if __name__ == "__main__":
    main()
