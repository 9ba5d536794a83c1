"""Engine module: builds the run-scoped translation engine from the config."""

from typing import Optional

from lproj_localize.config import LocalizeConfig, log
from lproj_localize.engine.cache import TranslationCache
from lproj_localize.engine.engine import TranslationEngine


def build_engine(config: LocalizeConfig) -> Optional[TranslationEngine]:
    """
    Assembles the provider chain: the configured service first, then the
    keyless providers as fallbacks unless config.free_fallback is off.
    Returns None when translation is disabled.
    """
    service = config.translate_service
    if service == 'none':
        log.info('[ENGINE] Translation disabled, new entries keep base values')
        return None

    providers = []

    if service == 'google':
        from lproj_localize.engine.providers.google import GoogleCloudProvider
        providers.append(GoogleCloudProvider(api_key=config.translate_key,
                                             api_url=config.translate_api))
        log.info('[ENGINE] Provider google added')

    elif service == 'deepl':
        from lproj_localize.engine.providers.deepl import DeepLProvider
        providers.append(DeepLProvider(api_key=config.translate_key,
                                       api_url=config.translate_api))
        log.info('[ENGINE] Provider deepl added')

    if service == 'google_free' or config.free_fallback:
        from lproj_localize.engine.providers.google_free import GoogleFreeProvider
        providers.append(GoogleFreeProvider())
        log.info('[ENGINE] Provider google_free added')

    if service == 'mymemory' or config.free_fallback:
        from lproj_localize.engine.providers.mymemory import MyMemoryProvider
        providers.append(MyMemoryProvider(email=config.translate_email))
        log.info('[ENGINE] Provider mymemory added')

    return TranslationEngine(providers, TranslationCache(),
                             max_workers=config.translate_workers)
