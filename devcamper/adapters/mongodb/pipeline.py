"""
MongoDB pipeline builder.

Converts query descriptors to MongoDB aggregation pipelines.
"""

from typing import Any, Dict, List

from devcamper.core.models import Population, QueryDescriptor


def build_pipeline(descriptor: QueryDescriptor) -> List[Dict[str, Any]]:
    """
    Convert a query descriptor to an aggregation pipeline.

    Stage order: ``$match``, ``$sort``, ``$skip``, ``$limit``, one
    ``$lookup`` per relation expansion, then ``$project``. Relations are
    expanded after windowing so only the returned page is joined.

    Args:
        descriptor: Query to convert

    Returns:
        List of pipeline stages
    """
    pipeline: List[Dict[str, Any]] = [{"$match": descriptor.filter}]

    if descriptor.sort:
        pipeline.append({"$sort": {field: direction for field, direction in descriptor.sort}})

    if descriptor.skip:
        pipeline.append({"$skip": descriptor.skip})

    if descriptor.limit is not None:
        pipeline.append({"$limit": descriptor.limit})

    for population in descriptor.populate:
        pipeline.extend(build_lookup_stages(population))

    projection = descriptor.output_projection()
    if projection:
        pipeline.append({"$project": projection})

    return pipeline


def build_lookup_stages(population: Population) -> List[Dict[str, Any]]:
    """
    Build the stages that embed one relation.

    Single relations are unwrapped from the ``$lookup`` array with
    ``$arrayElemAt``; a missing target leaves the path unset.
    """
    lookup: Dict[str, Any] = {
        "from": population.collection,
        "localField": population.local_field,
        "foreignField": population.foreign_field,
        "as": population.path,
    }

    # localField/foreignField combined with a sub-pipeline needs MongoDB 5.0+
    projection = population.projection()
    if projection:
        lookup["pipeline"] = [{"$project": projection}]

    stages: List[Dict[str, Any]] = [{"$lookup": lookup}]
    if population.just_one:
        stages.append(
            {"$addFields": {population.path: {"$arrayElemAt": [f"${population.path}", 0]}}}
        )
    return stages
