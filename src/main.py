import logging
import sys
from pathlib import Path

# Add src directory to Python path
src_dir = str(Path(__file__).parent)
if src_dir not in sys.path:
    sys.path.append(src_dir)

from dotenv import load_dotenv
from bots.concierge_bot import ConciergeBot
from config.settings import settings

logger = logging.getLogger(__name__)

def main():
    """Start the bot."""
    load_dotenv()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not settings.bot_token:
        logger.error("Error: CONCIERGE_BOT_TOKEN not found in environment variables")
        return

    bot = ConciergeBot(settings)
    logger.info("Starting bot...")

    try:
        bot.run()
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.error(f"Error running bot: {str(e)}", exc_info=True)

if __name__ == "__main__":
    main()
