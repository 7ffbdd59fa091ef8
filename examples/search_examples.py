"""搜索使用示例.

本示例展示如何:
1. 用查询原语构建请求体
2. 用 BoolQuery 组合嵌套查询
3. 通过 SearchClient 发送请求并解码结果
4. 查询过于复杂时回退到原始字典
"""

import asyncio
from dataclasses import dataclass

from elasticsearch.dsl import Search

from elasticquery import (
    BoolQuery,
    ClientConfig,
    Exists,
    Fuzzy,
    MatchPhrase,
    MultiMatch,
    MultiMatchType,
    Query,
    QueryContainer,
    Range,
    SearchClient,
    Terms,
)


@dataclass
class Recipe:
    title: str
    tags: list[str]


# ==================== 示例 1: 单个原语 ====================
def example_primitives():
    """示例: 各原语的独立编码与包裹后的编码."""
    print(MatchPhrase("title", "puttanesca spaghetti").to_json())
    print(Query(MatchPhrase("title", "puttanesca spaghetti")).to_json())
    print(Query(Terms("tags.keyword", ["Soup", "Cake"])).to_json())
    print(Query(Range("in_stock", gte=1, lte=5)).to_json())
    print(
        Range.textual(
            "created", gte="01-01-2010", lte="31-12-2010", format="dd-MM-yyyy"
        ).to_json()
    )
    print(
        MultiMatch(
            "pasta",
            ["title", "description"],
            type=MultiMatchType.CROSS_FIELDS,
            tie_breaker=0.3,
        ).to_json()
    )


# ==================== 示例 2: Bool 嵌套 ====================
def example_bool_nesting():
    """示例: 查询标题包含短语、带标签、且库存在 1~5 之间，或者名称模糊匹配的菜谱."""
    query = BoolQuery(
        should=[
            BoolQuery(
                must=[MatchPhrase("title", "spaghetti"), Exists("tags")],
                filter=[Range("in_stock", gte=1, lte=5)],
            ),
            Fuzzy("title", "spagetti", fuzziness=2, transpositions=True),
        ],
        minimum_should_match=1,
    )
    container = QueryContainer(Query(query), size=20)
    print(container.to_json())
    return container


# ==================== 示例 3: 发送请求 ====================
async def example_search():
    """示例: 发送类型化查询并解码为 Recipe."""
    config = ClientConfig(server_url="http://localhost:9200")
    async with SearchClient.from_config(config) as client:
        container = QueryContainer(Query(MatchPhrase("title", "spaghetti")))
        result = await client.search("recipes", container, Recipe)
        for recipe in result.sources():
            print(recipe.title, recipe.tags)

        # 原始字典与 elasticsearch.dsl.Search 都可以作为查询
        raw = await client.search_generic(
            "recipes", {"query": {"match": {"title": "soup"}}}
        )
        print(raw["hits"]["total"])

        search = Search().query("match", title="cake")
        result = await client.search("recipes", search, Recipe)
        print(len(result))


if __name__ == "__main__":
    # 运行所有示例
    example_primitives()
    example_bool_nesting()
    asyncio.run(example_search())
