from __future__ import annotations

from typing import Dict, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class UnknownToolError(KeyError):
    def __init__(self, tool_id: str) -> None:
        super().__init__(tool_id)
        self.tool_id = tool_id

    def __str__(self) -> str:
        return f"Unknown tool: {self.tool_id!r}"


class Tool(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable tool identifier")
    name: str = Field(..., description="Display label")
    description: str = Field(..., description="Short summary shown next to the label")
    icon: str = ""


TOOLS: Tuple[Tool, ...] = (
    Tool(id="listing_writer", name="Listing Creator", icon="📝",
         description="Generate full product listings"),
    Tool(id="title_optimizer", name="Title SEO", icon="✨",
         description="Optimize titles for B2B search"),
    Tool(id="pricing_advisor", name="Pricing & MOQ", icon="💰",
         description="Strategy for wholesale tiers"),
    Tool(id="rfq_generator", name="RFQ / Quote", icon="📄",
         description="Inquiry and quote templates"),
    Tool(id="market_research", name="Market Analysis", icon="📊",
         description="Demand & competition frameworks"),
    Tool(id="communication", name="Biz Messaging", icon="💬",
         description="Supplier/buyer templates"),
    Tool(id="audit", name="Listing Audit", icon="🔍",
         description="Analyze existing content"),
)

_TOOLS_BY_ID: Dict[str, Tool] = {tool.id: tool for tool in TOOLS}


def get_tool(tool: Union[Tool, str]) -> Tool:
    if isinstance(tool, Tool):
        return tool
    try:
        return _TOOLS_BY_ID[tool]
    except KeyError:
        raise UnknownToolError(tool) from None
