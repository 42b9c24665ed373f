"""
Entry point for the Wild Apricot migration tool.
"""

import glob
import os
from wa_migration.migration_tool import MigrationTool

CONFIG_FILE = "config/migration_config.json"


def main():
    """
    Main function to run the Wild Apricot migration tool.
    """
    tool = MigrationTool(config_file=CONFIG_FILE)
    tool.log_message("Starting Wild Apricot migration.")

    crawl_report = tool.config["migration"]["crawl_report"]
    if not crawl_report or not os.path.exists(crawl_report):
        # Fall back to the newest crawl report in the default crawl directory
        crawl_path = "reports/crawl/"
        reports = sorted(glob.glob(os.path.join(crawl_path, "*.json")), key=os.path.getmtime)
        tool.log_message(f"Discovered crawl reports: {reports}", level="DEBUG")
        if not reports:
            tool.log_message(
                f"No crawl report configured and none found in '{crawl_path}' directory.",
                level="ERROR",
            )
            return
        crawl_report = reports[-1]

    project = tool.run(crawl_report)
    tool.log_message(f"Migration project '{project.name}' ready with {len(project.pages)} pages.")


if __name__ == "__main__":
    main()
