#!/usr/bin/env python3
"""
Disk Status - S.M.A.R.T. Disk Health Reporter

Copyright (C) 2026 Magnus S. Modig

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.
"""

import argparse
import json
import os
import signal
import sys
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from config_manager import apply_env_overrides, get_section, load_config
from decision_engine import (
    ERROR_ATTRIBUTES,
    WARN_ATTRIBUTES,
    classify_attribute,
    evaluate_health_verdict,
    is_assessed,
)
from device_scanner import DiagnosticResult, candidate_devices, get_smartctl, query_device, scan_devices
from disk_logger import FatalError, LeveledLogSink
from report_parser import DeviceReport, parse_device_report

# Signals that end the run through the normal cleanup path (SIGINT raises KeyboardInterrupt)
CLEANUP_SIGNALS = ('SIGHUP', 'SIGQUIT', 'SIGALRM', 'SIGTERM')


class SMARTMonitor:
    """Runs smartctl for each device and reports every relevant attribute to a sink"""

    def __init__(self, sink, smartctl=None,
                 query: Optional[Callable[[str], Optional[DiagnosticResult]]] = None,
                 exists: Callable[[str], bool] = os.path.exists,
                 error_attributes: Mapping[int, str] = ERROR_ATTRIBUTES,
                 warn_attributes: Mapping[int, str] = WARN_ATTRIBUTES):
        self.sink = sink
        self.query = query or (lambda path: query_device(path, smartctl))
        self.exists = exists
        self.error_attributes = error_attributes
        self.warn_attributes = warn_attributes

    def run(self, device_paths: Iterable[str]) -> List[Dict[str, Any]]:
        """Report every existing device in order, skipping paths that don't exist"""
        summaries = []
        for device_path in device_paths:
            if not self.exists(device_path):
                continue
            summaries.append(self.report_device(device_path))
        return summaries

    def read_device(self, device_path: str) -> DeviceReport:
        """Query smartctl and parse the result"""
        self.sink.trace(f"Running smartctl -a {device_path}")
        result = self.query(device_path)
        if result is None:
            self.sink.debug(f"smartctl could not be executed for {device_path}")
            return DeviceReport(device_path)
        if result.returncode:
            self.sink.trace(f"smartctl exited with status {result.returncode} for {device_path}")
        return parse_device_report(device_path, result.text)

    def report_device(self, device_path: str) -> Dict[str, Any]:
        """
        Emit the health block for one device.

        Returns:
            JSON-ready summary with the severity assigned to each reported attribute
        """
        report = self.read_device(device_path)
        summary = report.to_dict()
        summary['attributes'] = []

        if not report.smart_capable:
            self.sink.error(f"{device_path} SMART information is not available.")
            summary['health_severity'] = None
            self.sink.separator()
            return summary

        self.sink.notice(device_path)

        health_severity = evaluate_health_verdict(report.overall_health)
        self.sink.emit(health_severity, f"Health:\t{report.overall_health}")
        summary['health_severity'] = health_severity.value

        for observation in report.observations:
            if not is_assessed(observation):
                continue
            severity = classify_attribute(observation, self.error_attributes, self.warn_attributes)
            if severity is None:
                continue
            self.sink.emit(severity, f"{observation.name}:\t{observation.raw_value}")
            entry = observation.to_dict()
            entry['severity'] = severity.value
            summary['attributes'].append(entry)

        for line in report.skipped_lines:
            self.sink.debug(f"Skipped malformed attribute line: {line.strip()}")

        self.sink.separator()
        return summary


def _raise_exit(signum, frame):
    raise SystemExit(128 + signum)


def install_signal_handlers():
    """Turn termination signals into SystemExit so the log still gets flushed"""
    for name in CLEANUP_SIGNALS:
        signum = getattr(signal, name, None)
        if signum is not None:
            signal.signal(signum, _raise_exit)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='disk-status',
        description='S.M.A.R.T. disk status - report disk health as leveled log lines',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '-d', '--device',
        action='append',
        help='Check only this device (e.g., /dev/sda). May be repeated'
    )

    parser.add_argument(
        '-l', '--list',
        action='store_true',
        help='List existing candidate devices and exit'
    )

    parser.add_argument(
        '--format',
        choices=['text', 'json'],
        help='Also print one JSON object per device to stdout with "json"'
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Show INFO messages on the terminal')
    parser.add_argument('--debug', action='store_true', help='Show DEBUG messages on the terminal')
    parser.add_argument('--trace', action='store_true', help='Show TRACE messages on the terminal')
    parser.add_argument('--no-color', action='store_true', help='Disable terminal colors')
    parser.add_argument('--log-file', type=str, help='Persistent log file to append to')
    parser.add_argument('--config', type=str, help='Alternate settings.json')
    parser.add_argument('--sudo', action='store_true', help='Run smartctl through sudo')

    return parser


def resolve_config(args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Settings file, then environment flags, then command-line flags"""
    config = apply_env_overrides(load_config(args.config), environ)
    logging_cfg = config['logging']

    if args.verbose:
        logging_cfg['verbose'] = True
    if args.debug:
        logging_cfg['debug'] = True
    if args.trace:
        logging_cfg['trace'] = True
    if args.no_color:
        logging_cfg['color'] = False
    if args.log_file:
        logging_cfg['log_file'] = args.log_file
    if args.sudo:
        config['scan']['smartctl_sudo'] = True
    if args.format:
        config['output']['format'] = args.format

    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    config = resolve_config(args)
    scan_cfg = get_section(config, 'scan')
    prefix = scan_cfg.get('device_prefix', '/dev/sd')

    if args.list:
        for device_path in scan_devices(prefix):
            print(device_path)
        return 0

    install_signal_handlers()
    sink = LeveledLogSink(get_section(config, 'logging'))

    try:
        with sink:
            sink.debug(f"Log file: {sink.log_file}")
            monitor = SMARTMonitor(sink, smartctl=get_smartctl(scan_cfg.get('smartctl_sudo', False)))
            summaries = monitor.run(args.device or candidate_devices(prefix))

            if get_section(config, 'output').get('format') == 'json':
                for summary in summaries:
                    print(json.dumps(summary))
    except FatalError as e:
        return e.exit_code
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
