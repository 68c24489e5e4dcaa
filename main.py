#!/usr/bin/env python3
import argparse
import json
import logging
import sys
from collections import ChainMap

from pbxtext import PbxprojError, build, parse, resolve_build_setting

log = logging.getLogger("pbxtext.cli")


# ----------------------
# JSON
# ----------------------
def json_default(value):
    if isinstance(value, bytes):
        return value.hex()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def json_out(project):
    return json.dumps(project, indent="\t", ensure_ascii=False, default=json_default)


# ----------------------
# Build settings
# ----------------------
def configuration_settings(objects, owner, configuration):
    config_list = objects.get(owner.get("buildConfigurationList"), {})
    for config_id in config_list.get("buildConfigurations", []):
        config = objects.get(config_id, {})
        if config.get("name") == configuration:
            return config.get("buildSettings", {})
    raise LookupError(f"No {configuration!r} configuration for {owner.get('name', owner.get('isa'))}")


def build_settings(project, configuration, target=None):
    """Settings for ``configuration``; a target's own settings win over the project's."""
    objects = project.get("objects", {})
    root = objects.get(project.get("rootObject"), {})
    owners = [root]
    if target is not None:
        matches = [
            objects[target_id]
            for target_id in root.get("targets", [])
            if objects.get(target_id, {}).get("name") == target
        ]
        if not matches:
            raise LookupError(f"No target named {target!r}")
        owners.insert(0, matches[0])
    return ChainMap(*(configuration_settings(objects, owner, configuration) for owner in owners))


# ----------------------
# MAIN
# ----------------------
def main(argv=None):
    ap = argparse.ArgumentParser(description="Read, rewrite and query Xcode project.pbxproj files.")
    ap.add_argument("--input", required=True, help="path to a project.pbxproj")
    ap.add_argument("--format", choices=("pbxproj", "json"), default="pbxproj")
    ap.add_argument("--output", help="write here instead of stdout")
    ap.add_argument("--check", action="store_true", help="fail if the file is not in canonical form")
    ap.add_argument("--resolve", metavar="MACRO", help="expand a build setting string, e.g. '$(PRODUCT_NAME:lower)'")
    ap.add_argument("--configuration", default="Release")
    ap.add_argument("--target", help="resolve against this target's settings")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    with open(args.input, "r", encoding="utf-8", newline="") as f:
        text = f.read()

    try:
        project = parse(text)
        if args.resolve is not None:
            settings = build_settings(project, args.configuration, args.target)
            out = resolve_build_setting(args.resolve, settings) + "\n"
        elif args.format == "json":
            out = json_out(project) + "\n"
        else:
            out = build(project)
    except (PbxprojError, LookupError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.check:
        if out != text:
            print(f"{args.input} is not in canonical form", file=sys.stderr)
            return 1
        log.debug("%s is canonical", args.input)
        return 0

    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as f:
            f.write(out)
    else:
        sys.stdout.write(out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
