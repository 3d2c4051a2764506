"""DI container. Wire via init_container(); endpoints use Depends(Provide[Container.*])."""
from datetime import timedelta
from typing import Annotated

from dependency_injector import containers, providers
from dependency_injector.wiring import Provide
from fastapi import Depends

from second_thought.config import Settings
from second_thought.db import (SqlCoolDownStore, SqlInterventionStore,
                               SqlUserProfileStore, create_db_engine)
from second_thought.providers import (ApiKeyPool, OpenAIInferenceProvider,
                                      OpikRelevanceJudge, TraceClient)
from second_thought.services import (AnalysisService, CoolDownManager,
                                     EvaluationScorer, TrackingService,
                                     UserProfileManager)


def _hours(value: float) -> timedelta:
    return timedelta(hours=value)


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(
        modules=[
            "second_thought.routers.analyze",
            "second_thought.routers.cooldowns",
            "second_thought.routers.profiles",
            "second_thought.routers.track",
        ]
    )

    settings = providers.Singleton(Settings.from_env)

    engine = providers.Singleton(
        create_db_engine, settings.provided.database_url, echo=settings.provided.sql_echo
    )
    cooldown_store = providers.Singleton(SqlCoolDownStore, engine)
    profile_store = providers.Singleton(SqlUserProfileStore, engine)
    intervention_store = providers.Singleton(SqlInterventionStore, engine)

    key_pool = providers.Singleton(ApiKeyPool, settings.provided.llm_api_keys)
    inference_provider = providers.Singleton(
        OpenAIInferenceProvider,
        key_pool,
        model=settings.provided.llm_model,
        base_url=settings.provided.llm_base_url,
        timeout=settings.provided.llm_timeout_seconds,
    )
    relevance_judge = providers.Singleton(
        OpikRelevanceJudge.for_endpoint,
        settings.provided.llm_model,
        settings.provided.llm_base_url,
        settings.provided.llm_api_keys,
    )
    evaluator = providers.Singleton(EvaluationScorer, relevance_judge)

    trace_client = providers.Singleton(TraceClient.from_settings, settings)

    profile_manager = providers.Singleton(UserProfileManager, profile_store)
    cooldown_manager = providers.Singleton(
        CoolDownManager,
        cooldown_store,
        profile_resolver=profile_manager.provided.get,
        duration=providers.Callable(_hours, settings.provided.cooldown_hours),
    )
    analysis_service = providers.Singleton(
        AnalysisService,
        inference_provider,
        profile_manager,
        trace_client,
        evaluator=evaluator,
    )
    tracking_service = providers.Singleton(
        TrackingService, trace_client, interventions=intervention_store
    )


# Type aliases for route injection (avoid repeating Annotated[...] in every route)
AnalysisServiceDep = Annotated[AnalysisService, Depends(Provide[Container.analysis_service])]
CoolDownManagerDep = Annotated[CoolDownManager, Depends(Provide[Container.cooldown_manager])]
ProfileManagerDep = Annotated[UserProfileManager, Depends(Provide[Container.profile_manager])]
TrackingServiceDep = Annotated[TrackingService, Depends(Provide[Container.tracking_service])]
TraceClientDep = Annotated[TraceClient, Depends(Provide[Container.trace_client])]


def init_container() -> Container:
    """Create container and wire to router modules."""
    container = Container()
    container.wire()
    return container
