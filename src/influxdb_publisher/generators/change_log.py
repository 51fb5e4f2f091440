from typing import List

from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.models.metrics import Point
from influxdb_publisher.models.reports import ChangeLog

from .base import PointGenerator


class ChangeLogPointGenerator(PointGenerator):
    name = "Change Log"
    report_attr = "change_log"

    def generate(self, build: BuildContext) -> List[Point]:
        change_log = self.load_report(build, ChangeLog)
        commits = change_log.commits

        affected_paths = sorted({path for commit in commits for path in commit.affected_paths})
        culprits = sorted({commit.author for commit in commits if commit.author})

        fields = {
            "commit_count": len(commits),
            "affected_path_count": len(affected_paths),
            "affected_paths": ", ".join(affected_paths),
            "culprits": ", ".join(culprits),
            "commit_messages": "; ".join(commit.message for commit in commits if commit.message),
        }
        return [self.build_point("changelog_data", build, fields=fields, timestamp=self.report_timestamp(change_log))]
