"""Terraform driver for applying and tearing down the module under test.

Wraps the Terraform CLI:
- Init, plan, apply and destroy a module directory
- Pass input variables and environment overrides
- Read named outputs back
- Guarantee teardown through a context manager
"""

import json
import logging
import os
import subprocess
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Generator

logger = logging.getLogger(__name__)

# Flags shared by every state-touching command
COMMON_FLAGS = ["-input=false", "-no-color"]


class TerraformError(Exception):
    """Raised when a Terraform command exits non-zero."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            f"'{' '.join(command)}' failed with exit code {returncode}: {stderr.strip()}"
        )


@dataclass
class TerraformOptions:
    """Inputs for running Terraform against one module directory."""

    terraform_dir: str
    vars: dict[str, Any] = field(default_factory=dict)
    env_vars: dict[str, str] = field(default_factory=dict)
    terraform_binary: str = "terraform"


def format_var(name: str, value: Any) -> str:
    """Format a single input variable as a ``-var`` argument value.

    Strings are passed raw. Everything else (maps, lists, numbers, bools)
    is JSON-encoded, which Terraform parses as an HCL expression.
    """
    if isinstance(value, str):
        return f"{name}={value}"
    return f"{name}={json.dumps(value)}"


def var_args(vars: dict[str, Any]) -> list[str]:
    """Build ``-var`` arguments for all input variables."""
    args: list[str] = []
    for name, value in vars.items():
        args.extend(["-var", format_var(name, value)])
    return args


class Terraform:
    """Runs Terraform commands for a single module directory.

    Each instance is bound to one TerraformOptions; one instance per
    scenario keeps scenarios independent.
    """

    def __init__(self, options: TerraformOptions):
        """Initialize the driver.

        Args:
            options: Module directory, variables and environment overrides
        """
        self.options = options

    def _env(self) -> dict[str, str]:
        env = os.environ.copy()
        env.setdefault("TF_IN_AUTOMATION", "1")
        env.update(self.options.env_vars)
        return env

    def run(self, *args: str) -> subprocess.CompletedProcess:
        """Run a Terraform subcommand in the module directory.

        Args:
            *args: Subcommand and its arguments

        Returns:
            The completed process with captured stdout and stderr.

        Raises:
            TerraformError: If the command exits non-zero.
        """
        command = [self.options.terraform_binary, *args]
        logger.debug("Running %s in %s", " ".join(command), self.options.terraform_dir)

        result = subprocess.run(
            command,
            cwd=self.options.terraform_dir,
            check=False,
            capture_output=True,
            text=True,
            env=self._env(),
        )

        if result.returncode != 0:
            logger.debug("Terraform stderr:\n%s", result.stderr)
            raise TerraformError(command, result.returncode, result.stdout, result.stderr)

        return result

    def init(self) -> None:
        self.run("init", "-upgrade=false", *COMMON_FLAGS)

    def plan(self) -> str:
        """Run ``terraform plan`` and return its stdout."""
        result = self.run("plan", "-lock=false", *COMMON_FLAGS, *var_args(self.options.vars))
        return result.stdout

    def apply(self) -> str:
        """Run ``terraform apply`` and return its stdout."""
        result = self.run(
            "apply",
            "-auto-approve",
            "-lock=false",
            *COMMON_FLAGS,
            *var_args(self.options.vars),
        )
        return result.stdout

    def destroy(self) -> str:
        """Run ``terraform destroy`` and return its stdout."""
        result = self.run(
            "destroy",
            "-auto-approve",
            "-lock=false",
            *COMMON_FLAGS,
            *var_args(self.options.vars),
        )
        return result.stdout

    def init_and_apply(self) -> str:
        self.init()
        return self.apply()

    def init_and_plan(self) -> str:
        self.init()
        return self.plan()

    def output(self, name: str) -> str:
        """Read a single named output.

        Args:
            name: Output name (e.g. ``bucket_name``)

        Returns:
            The output value. Strings are returned as-is, a null output
            as an empty string, anything else as its JSON text.
        """
        result = self.run("output", "-no-color", "-json", name)
        value = json.loads(result.stdout)
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        return json.dumps(value)


@contextmanager
def provisioned(terraform: Terraform) -> Generator[Terraform, None, None]:
    """Apply the module on entry and destroy it on exit.

    Destroy runs whenever apply was attempted, including when apply or the
    body raised, so partially created resources are released too. A destroy
    failure is raised unless another exception is already propagating.
    """
    try:
        terraform.init_and_apply()
        yield terraform
    except BaseException:
        try:
            terraform.destroy()
        except (TerraformError, OSError) as e:
            logger.error("Destroy failed for %s: %s", terraform.options.terraform_dir, e)
        raise
    else:
        terraform.destroy()
