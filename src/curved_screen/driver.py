"""
driver.py - Main workflow driver for curved_screen

Orchestrates the build workflow by:
- Loading configuration from YAML
- Building curved screens
- Validating their layout
- Generating output files (placement list, scene description)
"""

import json
import math
import os
import traceback

from curved_screen.core.logging_setup import get_logger
from curved_screen.core.screen_settings import GroupPose, ScreenConfig
from curved_screen.config.errors import ConfigError, ScreenConfigError
from curved_screen.config.loader import deep_merge, load_config
from curved_screen.curvature_validation import check_uv_coverage, validate_layout
from curved_screen.screen_builder import MaterialSettings, build_curved_screen

logger = get_logger(__name__)


class Driver:
    """Main driver class for the curved screen workflow"""

    def __init__(self):
        self.config_file = None
        self.config = None
        self.screens = {}
        self.reports = {}
        self.global_settings = {}
        self.output_files = {}
        self.metadata = {}

    def load_configuration(self, config_file):
        """
        Load configuration from YAML file

        Args:
            config_file: Path to YAML configuration file
        """
        self.config_file = config_file
        logger.info(f"Loading config: {config_file}")

        try:
            self.config = load_config(config_file)
        except ConfigError as e:
            logger.error(f"Failed to load config: {e}")
            raise

        self.global_settings = self.config.global_settings
        self.output_files = self.config.output_files
        self.metadata = self.config.metadata

        logger.info("✅ Config loaded")

    def workflow(self):
        """Execute the workflow defined in the config"""
        logger.info("Running: workflow()")

        for operation in self.config.workflow:
            description = operation.get('description', operation.get('operation'))
            logger.info(f"Executing: {description}")

            try:
                self._execute_operation(operation)
            except Exception as e:
                logger.error(f"Operation failed: {e}")
                logger.debug(f"Full traceback:\n{traceback.format_exc()}")
                raise

        logger.info("✅ Workflow complete")

    def _execute_operation(self, operation):
        """Execute a single operation"""
        operation_type = operation.get('operation')

        if operation_type == 'build_screen':
            self._execute_build_screen(operation)
        elif operation_type == 'validate_layout':
            self._validate_layout(operation)
        elif operation_type == 'write_placement_list':
            self._write_placement_list(operation)
        elif operation_type == 'export_scene':
            self._export_scene(operation)
        else:
            logger.warning(f"Unknown operation type: {operation_type}")

    def _execute_build_screen(self, operation):
        """Build one curved screen from the config defaults plus operation overrides"""
        name = operation.get('name', 'curved_screen')
        if name in self.screens:
            logger.warning(f"Replacing existing screen '{name}'")

        screen_settings = deep_merge(self.config.screen,
                                     operation.get('screen', {}) or {})
        screen_settings['group_pose'] = GroupPose.from_dict({
            key: operation[key] for key in ('position', 'rotation', 'scale') if key in operation
        })
        config = ScreenConfig.from_dict(screen_settings)

        material = MaterialSettings.from_dict(
            deep_merge(self.config.material, operation.get('material', {}) or {}),
            texture=operation.get('texture'),
        )

        self.screens[name] = build_curved_screen(config, name=name, material=material)

    def _selected_screens(self, operation):
        names = operation.get('names') or ([operation['name']] if 'name' in operation else list(self.screens))
        missing = [n for n in names if n not in self.screens]
        if missing:
            raise ConfigError(f"Unknown screen(s) {missing}; built: {list(self.screens)}")
        return [(n, self.screens[n]) for n in names]

    def _validate_layout(self, operation):
        """Validate seams, tangents and UV coverage of built screens"""
        max_tangent = operation.get('max_tangent_degrees', 45.0)
        fail_on_error = operation.get('fail_on_error', False)

        for name, screen in self._selected_screens(operation):
            report = validate_layout(screen.poses, screen.config.screen_width,
                                     max_tangent_degrees=max_tangent)
            coverage = check_uv_coverage(screen.uv_quads)
            if not coverage['valid']:
                report.passed = False
                report.issues.append(coverage['message'])
                logger.warning(f"'{name}': {coverage['message']}")

            self.reports[name] = report
            if fail_on_error and not report.passed:
                raise ScreenConfigError(f"Layout validation failed for '{name}': {report.message}")

    def _resolve_output(self, operation, key):
        output_file = operation.get('file') or self.output_files.get(key)
        if not output_file:
            return None
        if not os.path.isabs(output_file):
            base_dir = self.output_files.get('working_directory', '') or ''
            if not os.path.isabs(base_dir) and self.config_file:
                base_dir = os.path.join(os.path.dirname(os.path.abspath(self.config_file)), base_dir)
            output_file = os.path.join(base_dir, output_file)
        os.makedirs(os.path.dirname(os.path.abspath(output_file)), exist_ok=True)
        return output_file

    def _write_placement_list(self, operation):
        """Write a text table of every segment's placement and texture strip"""
        output_file = self._resolve_output(operation, 'placement_file')
        if not output_file:
            logger.warning("No placement list file specified")
            return

        with open(output_file, 'w') as f:
            f.write("=" * 80 + "\n")
            f.write("PLACEMENT LIST - CURVED SCREEN\n")
            f.write("=" * 80 + "\n\n")
            f.write(f"PROJECT: {self.metadata.get('project_name', 'Unnamed Project')}\n")
            f.write(f"Total Screens: {len(self.screens)}\n")
            f.write("=" * 80 + "\n\n")

            for name, screen in self._selected_screens(operation):
                config = screen.config
                pose = config.group_pose
                f.write(f"SCREEN: {name}\n")
                f.write("=" * 80 + "\n\n")
                f.write(f"Segments: {config.segment_count}\n")
                f.write(f"Size: {config.screen_width} x {config.screen_height}\n")
                f.write(f"Curve factor: {config.resolved_curve_factor}\n")
                f.write(f"Group position: {self._format_vector(pose.position)}\n")
                f.write(f"Group rotation: {self._format_vector(pose.rotation)}\n")
                f.write(f"Group scale: {self._format_vector(pose.scale)}\n")
                f.write("\n" + "-" * 80 + "\n\n")

                f.write(f"{'Seg':<5} {'X':>9} {'Z':>9} {'Yaw°':>8} {'Width':>9} {'U start':>9} {'U end':>9}\n")
                f.write("-" * 80 + "\n")
                for node in screen.nodes:
                    p, uv = node.pose, node.uv
                    f.write(f"{p.index:<5} {p.x:>9.4f} {p.z:>9.4f} {p.rotation_y_degrees:>8.2f} "
                            f"{p.adjusted_width:>9.4f} {uv.u_start:>9.4f} {uv.u_end:>9.4f}\n")

                report = self.reports.get(name)
                if report is not None:
                    f.write("\n" + report.message + "\n")
                f.write("\n" + "-" * 80 + "\n\n")

            f.write("=" * 80 + "\n")
            f.write("COLUMN DEFINITIONS\n")
            f.write("=" * 80 + "\n\n")
            f.write("X, Z:       Segment centre relative to the screen group\n")
            f.write("Yaw°:       Rotation about the vertical axis\n")
            f.write("Width:      Panel width after widening to close rotated seams\n")
            f.write("U start/end: Horizontal texture strip shown on the visible face\n")

        logger.info(f"✓ Placement list written: {output_file}")

    def _export_scene(self, operation):
        """Write the host scene description as JSON"""
        output_file = self._resolve_output(operation, 'scene_file')
        if not output_file:
            logger.warning("No scene file specified")
            return

        scene = {
            'metadata': self.metadata,
            'screens': [screen.to_dict() for _, screen in self._selected_screens(operation)],
        }
        with open(output_file, 'w') as f:
            json.dump(scene, f, indent=2, default=str)

        logger.info(f"✓ Scene description written: {output_file}")

    @staticmethod
    def _format_vector(values):
        return "(" + ", ".join(f"{v:.3f}" if math.isfinite(v) else str(v) for v in values) + ")"
