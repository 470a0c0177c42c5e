import asyncio
import sys
import time
from dynaconf import Dynaconf
from dynaconf.validator import ValidationError
from loguru import logger

from ledger_indexer.asset_cache import AssetMetadataCache
from ledger_indexer.block_indexer import BlockIndexer
from ledger_indexer.db import create_db_engine, init_db
from ledger_indexer.fetcher import RemoteFetcher
from ledger_indexer.metrics import (
    BLOCKS_PROCESSED,
    CHAIN_TIP_BLOCK,
    CHAIN_TIP_LAG,
    LATEST_PROCESSED_BLOCK,
    TRANSFERS_INDEXED,
    start_metrics_server,
)
from ledger_indexer.rpc import ChainClient
from ledger_indexer.utils import load_config, unix_to_utc


async def main(config: Dynaconf) -> None:
    chain_name = config.chain.name
    poll_interval = float(config.chain.poll_interval)

    start_metrics_server(int(config.metrics.port), addr=config.metrics.addr)
    BLOCKS_PROCESSED.labels(chain=chain_name).inc(0)
    TRANSFERS_INDEXED.labels(chain=chain_name).inc(0)
    LATEST_PROCESSED_BLOCK.labels(chain=chain_name).set(0)
    CHAIN_TIP_BLOCK.labels(chain=chain_name).set(0)
    CHAIN_TIP_LAG.labels(chain=chain_name).set(0)

    session_factory = init_db(create_db_engine(config.storage.database_uri))

    async with ChainClient(config.chain.endpoint, chain_name) as client:
        asset_cache = AssetMetadataCache(session_factory, client, capacity=int(config.cache.asset_capacity))
        block_indexer = BlockIndexer(
            session_factory,
            asset_cache,
            chain_name=chain_name,
            fee_service=config.fees.service,
            fee_events=list(config.fees.events),
        )
        fetcher = RemoteFetcher(client)

        last_processed = block_indexer.get_last_processed_height()
        if last_processed is None:
            logger.info("Empty store, running genesis hook")
            await block_indexer.on_genesis()
            height_to_process = 0
        else:
            await asset_cache.load_native_asset()
            height_to_process = last_processed + 1
        logger.info(f"Last processed block: {last_processed}")
        logger.info(f"Starting indexer from block {height_to_process}")

        while True:
            tip = await client.get_latest_height()
            CHAIN_TIP_BLOCK.labels(chain=chain_name).set(tip)

            if height_to_process > tip:
                await asyncio.sleep(poll_interval)
                continue

            block_start_time = time.time()
            try:
                executed = await fetcher.fetch_executed_block(height_to_process)
                if executed is None:
                    await asyncio.sleep(poll_interval)
                    continue

                await block_indexer.index(executed)
            except Exception as e:
                # Nothing was committed, retry the same height
                logger.exception(f"Error processing block {height_to_process}: {e}")
                await asyncio.sleep(poll_interval)
                continue

            logger.info(
                f"Indexed block {height_to_process} ({unix_to_utc(executed.get_block().timestamp)}) in {time.time() - block_start_time:.2f} seconds "
                f"({len(executed.transactions)} transactions)"
            )
            CHAIN_TIP_LAG.labels(chain=chain_name).set(tip - height_to_process)
            height_to_process += 1

def run() -> None:
    try:
        config = load_config(sys.argv[1] if len(sys.argv) > 1 else "config.yml")
    except ValidationError as e:
        logger.error(f"Invalid configuration value: {e}")
        sys.exit(1)

    # Save logs to file
    logger.add(config.logging.file, rotation=config.logging.rotation, retention=config.logging.retention)

    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        logger.info("Program interrupted by user. Exiting.")
    except KeyError as e:
        logger.error(f"Configuration error: Missing key {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"An unexpected error occurred in the main loop: {e}")
        sys.exit(1)

if __name__ == "__main__":
    run()
