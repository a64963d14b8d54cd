#!/usr/bin/env python3
"""
KUBEOP CLI
----------
Primary interface for installing, removing and inspecting operator
deployment archives from a workstation or an agent host.

  inspect    decode the archive and show how every object is classified
  install    create the operator in the cluster
  uninstall  remove it again (best-effort)
  status     show the operator's container states

Author: KubeOp Team
Date: 2026-10-18
"""

import sys
import base64
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML, YAMLError

from kubeop.cli.formatter import KubeOpFormatter, console
from kubeop.cluster.client import load_kube_client
from kubeop.core.errors import KubeOpError
from kubeop.core.settings import AgentSettings
from kubeop.orchestration.engine import OperatorEngine

VERSION = "v0.1.0"
GZIP_MAGIC = b"\x1f\x8b"


def read_archive(path: str) -> str:
    """
    Accepts either the base64 deployment string or the raw .tar.gz, which
    is encoded on the fly.
    """
    data = Path(path).read_bytes()
    if data.startswith(GZIP_MAGIC):
        return base64.b64encode(data).decode("ascii")
    return data.decode("utf-8-sig").strip()


def read_metadata(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    loaded = YAML(typ="safe", pure=True).load(Path(path).read_text(encoding="utf-8"))
    if not isinstance(loaded, dict):
        raise ValueError(f"Metadata file {path} must hold a mapping")
    return loaded


def parse_env(pairs: List[str]) -> Dict[str, str]:
    """KEY=VALUE pairs; the value may itself contain '='."""
    env = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"Invalid --env entry '{pair}', expected KEY=VALUE")
        env[name] = value
    return env


class KubeOpCLI:
    """
    CLI wrapper that translates user commands into Engine actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="kubeop",
            description="KubeOp - Operator deployment installer for edge agents",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = KubeOpFormatter()
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("--version", action="version", version=f"kubeop {VERSION}")
        self.parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
        self.parser.add_argument("--kubeconfig", help="Path to the kubeconfig file")
        self.parser.add_argument("--context", help="Kubeconfig context to use")
        self.parser.add_argument("--agent-namespace", help="Namespace the agent runs in (default: $AGENT_NAMESPACE)")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        # 'inspect' subcommand - offline, no cluster access
        inspect_parser = subparsers.add_parser("inspect", help="🔍 Show how the archive is classified")
        inspect_parser.add_argument("archive", help="Base64 deployment file or .tar.gz")

        for name, help_text in (("install", "🚀 Install the operator"),
                                ("uninstall", "🧹 Remove the operator"),
                                ("status", "📋 Show operator container status")):
            sub = subparsers.add_parser(name, help=help_text)
            sub.add_argument("archive", help="Base64 deployment file or .tar.gz")
            sub.add_argument("--agreement-id", required=True, help="Workload / agreement identifier")
            sub.add_argument("-n", "--namespace", default="", help="Requested namespace")
            sub.add_argument("--metadata", help="YAML/JSON file with the deployment metadata")
            if name == "install":
                sub.add_argument("--env", action="append", default=[], metavar="KEY=VALUE",
                                 help="User input passed to the operator (repeatable)")
                sub.add_argument("--cr-timeout", type=float, default=180,
                                 help="Seconds to wait for custom resource kinds (default: 180)")
            if name == "status":
                sub.add_argument("--raw", action="store_true", help="Print the raw operator status payload")

    def _settings(self, args: argparse.Namespace) -> AgentSettings:
        settings = AgentSettings.from_env()
        if args.agent_namespace:
            settings.namespace = args.agent_namespace
        if args.kubeconfig:
            settings.kubeconfig = args.kubeconfig
        if args.context:
            settings.context = args.context
        return settings

    def _engine(self, settings: AgentSettings, offline: bool = False) -> OperatorEngine:
        kube = None if offline else load_kube_client(settings.kubeconfig, settings.context)
        return OperatorEngine(kube, settings)

    def _dispatch(self, args: argparse.Namespace):
        settings = self._settings(args)
        archive = read_archive(args.archive)

        if args.command == "inspect":
            self.formatter.print_header("Archive Inspection", VERSION)
            groups, declared = self._engine(settings, offline=True).process_deployment(archive)
            self.formatter.show_classification(groups)
            console.print(f"Declared namespace: [bold]{declared or '-'}[/bold]")
            return

        engine = self._engine(settings)
        metadata = read_metadata(args.metadata)

        if args.command == "install":
            self.formatter.print_header("Operator Install", VERSION)
            outcomes = engine.install(
                archive, metadata, parse_env(args.env), args.agreement_id,
                args.namespace, args.cr_timeout
            )
            self.formatter.show_outcomes("Installed Objects", outcomes)
        elif args.command == "uninstall":
            self.formatter.print_header("Operator Uninstall", VERSION)
            outcomes = engine.uninstall(archive, metadata, args.agreement_id, args.namespace)
            self.formatter.show_outcomes("Removed Objects", outcomes)
        elif args.command == "status":
            if args.raw:
                self.formatter.show_raw(
                    engine.operator_status(archive, metadata, args.agreement_id, args.namespace)
                )
            else:
                self.formatter.show_status(
                    engine.status(archive, metadata, args.agreement_id, args.namespace)
                )

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point. Returns the process exit code."""
        args = self.parser.parse_args(argv)
        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

        if not args.command:
            self.formatter.print_header("Operator Deployments", VERSION)
            self.parser.print_help()
            return 0

        try:
            self._dispatch(args)
        except (KubeOpError, OSError, ValueError, YAMLError) as e:
            self.formatter.show_error(str(e))
            return 1
        return 0


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(KubeOpCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
