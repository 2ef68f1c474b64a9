"""
Slack to Box group relay - mirrors Slack channel membership into Box groups
and lets channel members share Box items with the whole channel via /boxadd
"""


import logging

import uvicorn
from fastapi import FastAPI

from core.config import SlackConfig, load_slack_config, settings
from core.logging import configure_logging
from services.box_client import BoxClient
from services.box_command import BoxAddCommand
from services.group_sync import GroupSyncService
from services.slack_client import SlackClient
from services.webhook_router import router


def create_app(
    slack_config: SlackConfig = None,
    slack_client: SlackClient = None,
    box_client: BoxClient = None,
) -> FastAPI:
    """Build the app, loading secrets from the configured files for anything not passed in"""
    slack_config = slack_config or load_slack_config(settings.SLACK_CONFIG_PATH)
    slack_client = slack_client or SlackClient(bot_token=slack_config.bot_token)
    box_client = box_client or BoxClient.from_settings_file(settings.BOX_CONFIG_PATH)

    group_sync = GroupSyncService(slack_client, box_client)

    app = FastAPI(title="slack-box-relay", version=settings.VERSION)
    app.state.slack_config = slack_config
    app.state.slack = slack_client
    app.state.box = box_client
    app.state.group_sync = group_sync
    app.state.box_command = BoxAddCommand(slack_client, box_client, group_sync)
    app.include_router(router)

    return app




def main():
    """Main entry point"""
    configure_logging()

    try:
        app = create_app()
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        raise

    logging.info(f"Server listening on port {settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)




if __name__ == "__main__":
    main()
