"""Tests for job-level blocks: runs-on, environment, containers and strategy."""

from __future__ import annotations

import textwrap

from gha_models import load_workflow
from gha_models.config import ParserSettings
from gha_models.exceptions import (
    MissingRequiredFieldError,
    TypeMismatchError,
    UnrecognizedShapeError,
)
from gha_models.expressions import ExpressionKind
from gha_models.schema import (
    Container,
    DeploymentEnvironment,
    DockerCredentials,
    Matrix,
    NormalJob,
    ReusableWorkflowCallJob,
    RunsOn,
)
from gha_models.values import ExpressionValue, LiteralValue


def job(body: str, settings: ParserSettings):
    """Parse a workflow with a single job ``j`` built from ``body``."""
    text = "on: push\njobs:\n  j:\n" + textwrap.indent(textwrap.dedent(body).strip(), "    ")
    return load_workflow(text + "\n", settings)


def normal_job(body: str, settings: ParserSettings) -> NormalJob:
    result = job(textwrap.dedent(body).strip() + "\nsteps:\n  - run: make\n", settings)
    parsed = result.unwrap().jobs["j"]
    assert isinstance(parsed, NormalJob)
    return parsed


def lit(value: object) -> LiteralValue:
    return LiteralValue(value=value)


# =============================================================================
# runs-on
# =============================================================================


class TestRunsOn:
    """Tests for the runs-on shorthand forms."""

    def test_single_label(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job("runs-on: ubuntu-latest", strict_settings)
        assert parsed.runs_on == RunsOn(labels=(lit("ubuntu-latest"),))

    def test_label_list(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job("runs-on: [self-hosted, linux, x64]", strict_settings)
        assert parsed.runs_on == RunsOn(
            labels=(lit("self-hosted"), lit("linux"), lit("x64"))
        )

    def test_group_and_labels(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job(
            """
            runs-on:
              group: larger-runners
              labels: ubuntu-22.04-16core
            """,
            strict_settings,
        )
        assert parsed.runs_on == RunsOn(
            group=lit("larger-runners"), labels=(lit("ubuntu-22.04-16core"),)
        )

    def test_whole_value_expression(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job("runs-on: ${{ matrix.os }}", strict_settings)
        assert parsed.runs_on == ExpressionValue(
            raw="${{ matrix.os }}", kind=ExpressionKind.EXPLICIT
        )

    def test_interpolated_label_stays_a_label(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job("runs-on: ubuntu-${{ matrix.version }}", strict_settings)
        assert isinstance(parsed.runs_on, RunsOn)
        [label] = parsed.runs_on.labels
        assert isinstance(label, ExpressionValue)
        assert label.kind is ExpressionKind.INTERPOLATED

    def test_empty_mapping(self, strict_settings: ParserSettings) -> None:
        result = job("runs-on: {}\nsteps:\n  - run: make", strict_settings)
        assert isinstance(result.error, MissingRequiredFieldError)
        assert result.error.field == "group"
        assert result.error.path == ("jobs", "j", "runs-on")

    def test_empty_list(self, strict_settings: ParserSettings) -> None:
        result = job("runs-on: []\nsteps:\n  - run: make", strict_settings)
        assert isinstance(result.error, TypeMismatchError)
        assert result.error.path == ("jobs", "j", "runs-on")

    def test_missing(self, strict_settings: ParserSettings) -> None:
        result = job("steps:\n  - run: make", strict_settings)
        assert isinstance(result.error, MissingRequiredFieldError)
        assert result.error.field == "runs-on"


# =============================================================================
# environment and containers
# =============================================================================


class TestEnvironment:
    """Tests for the environment shorthand."""

    def test_scalar(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job("runs-on: x\nenvironment: production", strict_settings)
        assert parsed.environment == DeploymentEnvironment(name=lit("production"))

    def test_mapping_with_url(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job(
            """
            runs-on: x
            environment:
              name: pypi
              url: https://pypi.org/p/${{ github.event.repository.name }}
            """,
            strict_settings,
        )
        assert parsed.environment is not None
        assert parsed.environment.name == lit("pypi")
        assert isinstance(parsed.environment.url, ExpressionValue)
        assert parsed.environment.url.kind is ExpressionKind.INTERPOLATED

    def test_mapping_needs_name(self, strict_settings: ParserSettings) -> None:
        result = job(
            "runs-on: x\nenvironment:\n  url: https://example.com\nsteps:\n  - run: make",
            strict_settings,
        )
        assert isinstance(result.error, MissingRequiredFieldError)
        assert result.error.field == "name"


class TestContainer:
    """Tests for job and service containers."""

    def test_scalar(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job("runs-on: x\ncontainer: node:20", strict_settings)
        assert parsed.container == Container(image=lit("node:20"))

    def test_mapping(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job(
            """
            runs-on: x
            container:
              image: ghcr.io/owner/image:1
              credentials:
                username: bot
                password: ${{ secrets.GHCR_TOKEN }}
              env:
                NODE_ENV: development
              ports: [80, "8443:443"]
              volumes:
                - my_docker_volume:/volume_mount
              options: --cpus 1
            """,
            strict_settings,
        )
        container = parsed.container
        assert container is not None
        assert container.credentials == DockerCredentials(
            username=lit("bot"),
            password=ExpressionValue(
                raw="${{ secrets.GHCR_TOKEN }}", kind=ExpressionKind.EXPLICIT
            ),
        )
        assert container.env == {"NODE_ENV": lit("development")}
        assert container.ports == (lit(80), lit("8443:443"))
        assert container.volumes == (lit("my_docker_volume:/volume_mount"),)
        assert container.options == lit("--cpus 1")

    def test_services(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job(
            """
            runs-on: x
            services:
              redis: redis:7
              postgres:
                image: postgres:16
                ports: [5432]
            """,
            strict_settings,
        )
        assert list(parsed.services) == ["redis", "postgres"]
        assert parsed.services["redis"].image == lit("redis:7")
        assert parsed.services["postgres"].ports == (lit(5432),)

    def test_null_container(self, strict_settings: ParserSettings) -> None:
        result = job("runs-on: x\ncontainer:\nsteps:\n  - run: make", strict_settings)
        assert isinstance(result.error, TypeMismatchError)
        assert result.error.expected == "a scalar or a mapping"


# =============================================================================
# strategy
# =============================================================================


class TestStrategy:
    """Tests for strategy and matrix blocks."""

    def test_matrix_dimensions_and_combinations(
        self, strict_settings: ParserSettings
    ) -> None:
        parsed = normal_job(
            """
            runs-on: x
            strategy:
              fail-fast: false
              max-parallel: 2
              matrix:
                os: [ubuntu-latest, windows-latest]
                python: ["3.10", "3.12"]
                include:
                  - os: macos-latest
                    python: "3.12"
                    experimental: true
                exclude:
                  - os: windows-latest
                    python: "3.10"
            """,
            strict_settings,
        )
        strategy = parsed.strategy
        assert strategy is not None
        assert strategy.fail_fast == lit(False)
        assert strategy.max_parallel == lit(2)
        assert strategy.matrix == Matrix(
            dimensions={
                "os": ("ubuntu-latest", "windows-latest"),
                "python": ("3.10", "3.12"),
            },
            include=({"os": "macos-latest", "python": "3.12", "experimental": True},),
            exclude=({"os": "windows-latest", "python": "3.10"},),
        )

    def test_unquoted_version_is_a_number(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job(
            "runs-on: x\nstrategy:\n  matrix:\n    python: [3.10]", strict_settings
        )
        assert parsed.strategy is not None
        assert isinstance(parsed.strategy.matrix, Matrix)
        assert parsed.strategy.matrix.dimensions["python"] == (3.1,)

    def test_matrix_expression(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job(
            "runs-on: x\nstrategy:\n  matrix: ${{ fromJSON(needs.plan.outputs.matrix) }}",
            strict_settings,
        )
        assert parsed.strategy is not None
        assert isinstance(parsed.strategy.matrix, ExpressionValue)

    def test_include_expression(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job(
            "runs-on: x\nstrategy:\n  matrix:\n    include: ${{ fromJSON(inputs.extra) }}",
            strict_settings,
        )
        assert parsed.strategy is not None
        matrix = parsed.strategy.matrix
        assert isinstance(matrix, Matrix)
        assert matrix.dimensions == {}
        assert isinstance(matrix.include, ExpressionValue)

    def test_include_items_must_be_mappings(self, strict_settings: ParserSettings) -> None:
        result = job(
            "runs-on: x\nstrategy:\n  matrix:\n    include: [a]\nsteps:\n  - run: make",
            strict_settings,
        )
        assert isinstance(result.error, TypeMismatchError)
        assert result.error.path == ("jobs", "j", "strategy", "matrix", "include", 0)

    def test_dimension_must_be_a_sequence(self, strict_settings: ParserSettings) -> None:
        result = job(
            "runs-on: x\nstrategy:\n  matrix:\n    os: linux\nsteps:\n  - run: make",
            strict_settings,
        )
        assert isinstance(result.error, TypeMismatchError)
        assert result.error.path == ("jobs", "j", "strategy", "matrix", "os")

    def test_fail_fast_expression(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job(
            "runs-on: x\nstrategy:\n  fail-fast: ${{ inputs.fail-fast }}", strict_settings
        )
        assert parsed.strategy is not None
        assert isinstance(parsed.strategy.fail_fast, ExpressionValue)

    def test_fail_fast_must_be_boolean(self, strict_settings: ParserSettings) -> None:
        result = job(
            "runs-on: x\nstrategy:\n  fail-fast: sometimes\nsteps:\n  - run: make",
            strict_settings,
        )
        assert isinstance(result.error, TypeMismatchError)


# =============================================================================
# Other job fields
# =============================================================================


class TestJobFields:
    """Tests for the remaining job keys."""

    def test_defaults_timeout_and_continue_on_error(
        self, strict_settings: ParserSettings
    ) -> None:
        parsed = normal_job(
            """
            runs-on: x
            timeout-minutes: 30
            continue-on-error: ${{ matrix.experimental }}
            defaults:
              run:
                shell: bash
                working-directory: src
            outputs:
              version: ${{ steps.meta.outputs.version }}
            """,
            strict_settings,
        )
        assert parsed.timeout_minutes == lit(30)
        assert isinstance(parsed.continue_on_error, ExpressionValue)
        assert parsed.defaults is not None and parsed.defaults.run is not None
        assert parsed.defaults.run.shell == "bash"
        assert parsed.defaults.run.working_directory == lit("src")
        assert isinstance(parsed.outputs["version"], ExpressionValue)

    def test_needs_shorthand(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job("runs-on: x\nneeds: build", strict_settings)
        assert parsed.needs == ("build",)

    def test_default_condition(self, strict_settings: ParserSettings) -> None:
        parsed = normal_job("runs-on: x", strict_settings)
        assert parsed.if_ is None
        assert parsed.condition == ExpressionValue(
            raw="success()", kind=ExpressionKind.IMPLICIT
        )

    def test_reusable_job_secrets_inherit(self, strict_settings: ParserSettings) -> None:
        result = job(
            "uses: owner/repo/.github/workflows/ci.yml@main\nsecrets: inherit",
            strict_settings,
        )
        parsed = result.unwrap().jobs["j"]
        assert isinstance(parsed, ReusableWorkflowCallJob)
        assert parsed.secrets == "inherit"

    def test_reusable_job_rejects_runner_keys(self, strict_settings: ParserSettings) -> None:
        result = job(
            "uses: owner/repo/.github/workflows/ci.yml@main\ntimeout-minutes: 5",
            strict_settings,
        )
        assert isinstance(result.error, UnrecognizedShapeError)
