"""
Prompt Templates

System prompts fix the JSON shape of each artifact; user templates carry the
context. Every JSON-returning prompt ends with the same output rule so the
extractor can rely on a single object.
"""

import json
from typing import Any, Dict, List, Optional

JSON_ONLY = (
    "Respond with a single JSON object and nothing else: no markdown fences, "
    "no commentary before or after it."
)


# =============================================================================
# COMPETITOR ANALYSIS
# =============================================================================

COMPETITOR_SYSTEM = """You are a competitive intelligence expert. Analyze the given competitor using real SEO data from the Moz API and produce insights for marketing strategy.

Return JSON in this exact format:
{
  "insights": "string",
  "threats": "string",
  "opportunities": "string",
  "recommendations": "string"
}

""" + JSON_ONLY

COMPETITOR_TEMPLATE = """Analyze competitor: {name} ({website})

## SEO Metrics (Moz)
- Domain Authority: {domain_authority}/100
- Page Authority: {page_authority}/100
- Spam Score: {spam_score}/100
- Linking Domains: {linking_domains}
- Total Links: {total_links}
- SEO Strength: {seo_strength}
{degraded_note}
{company_block}
Based on these SEO metrics{company_suffix}, provide strategic marketing insights and actionable recommendations."""


# =============================================================================
# LANDSCAPE ANALYSIS
# =============================================================================

LANDSCAPE_SYSTEM = """You are a senior market strategist. Compare a company against its whole competitive set and produce a landscape report.

Return JSON in this exact format:
{
  "summary": "string",
  "keyInsights": ["string"],
  "competitivePosition": {
    "marketPosition": "string",
    "strengths": ["string"],
    "weaknesses": ["string"],
    "opportunities": ["string"],
    "threats": ["string"]
  },
  "competitorInsights": [
    {
      "id": "string",
      "name": "string",
      "threatLevel": "High | Medium | Low",
      "positioning": "string",
      "marketShare": "string",
      "strengths": ["string"],
      "weaknesses": ["string"]
    }
  ],
  "recommendations": [
    {
      "id": "string",
      "title": "string",
      "description": "string",
      "priority": "High | Medium | Low",
      "timeline": "string",
      "expectedImpact": "string",
      "actionItems": ["string"]
    }
  ],
  "marketOpportunities": ["string"],
  "strategicImplications": ["string"]
}

""" + JSON_ONLY

LANDSCAPE_TEMPLATE = """# COMPANY
```json
{company}
```

# COMPETITORS ({competitor_count})
```json
{competitors}
```

Produce the competitive landscape report. Include one competitorInsights entry per competitor listed above."""


# =============================================================================
# POSITIONING
# =============================================================================

POSITIONING_SYSTEM = """You are a brand positioning consultant. Assess how the company is positioned today and recommend sharper positioning options.

Return JSON in this exact format:
{
  "currentPositioning": {
    "overview": "string",
    "strengths": ["string"],
    "weaknesses": ["string"],
    "marketPosition": "string"
  },
  "recommendations": [
    {
      "id": "string",
      "category": "string",
      "title": "string",
      "description": "string",
      "keyPoints": ["string"],
      "messagingStyle": "string",
      "valueProposition": "string",
      "differentiators": ["string"],
      "targetSegments": ["string"],
      "confidence": 0.0
    }
  ]
}

confidence is a number between 0 and 1.

""" + JSON_ONLY

POSITIONING_TEMPLATE = """# COMPANY
```json
{company}
```

# COMPETITORS
```json
{competitors}
```

Assess the company's current positioning and recommend 3-5 positioning options."""


# =============================================================================
# BLOG IDEAS
# =============================================================================

BLOG_IDEAS_SYSTEM = """You are a content marketing strategist who plans SEO-driven blog calendars.

Return JSON in this exact format:
{
  "ideas": [
    {
      "id": "string",
      "title": "string",
      "description": "string",
      "keywords": ["string"],
      "estimatedLength": "string",
      "difficulty": "Easy | Medium | Hard",
      "targetAudience": "string",
      "contentPillars": ["string"],
      "seoScore": 0,
      "rationale": "string"
    }
  ]
}

seoScore is an integer between 0 and 100.

""" + JSON_ONLY

BLOG_IDEAS_TEMPLATE = """# COMPANY
```json
{company}
```

# COMPETITORS
```json
{competitors}
```

# ADOPTED POSITIONING
```json
{positioning}
```

# PREVIOUSLY REJECTED IDEAS (do not repeat or closely resemble these)
{rejected}

Propose {count} blog post ideas that reinforce the adopted positioning and differentiate from the competitors."""


# =============================================================================
# ARTICLES & FREE-FORM CONTENT
# =============================================================================

ARTICLE_SYSTEM = """You are a professional long-form writer. Write complete, publish-ready blog articles in markdown.

Return JSON in this exact format:
{
  "title": "string",
  "content": "markdown string",
  "metaDescription": "string",
  "keywords": ["string"],
  "wordCount": 0
}

""" + JSON_ONLY

ARTICLE_TEMPLATE = """# ARTICLE BRIEF
```json
{idea}
```

# COMPANY
```json
{company}
```

# COMPETITORS
```json
{competitors}
```

# ADOPTED POSITIONING
```json
{positioning}
```

Write the full article. Weave the keywords in naturally and speak to the target audience."""

CONTENT_SYSTEM = (
    "You are a professional content writer. Create high-quality marketing content "
    "based on the user's requirements. Write in the specified tone and include the "
    "target keywords naturally."
)

CONTENT_TEMPLATE = """Create a {content_type} about "{topic}".

Requirements:
- Target keywords: {keywords}
- Tone: {tone}
- Word count: {word_count}
- Additional instructions: {additional_instructions}
{company_block}
Write engaging, professional content suitable for marketing purposes."""


# =============================================================================
# CONTENT STRATEGY
# =============================================================================

STRATEGY_SYSTEM = """You are a content strategy expert. Create a comprehensive content strategy based on the company information.

Return JSON in this exact format:
{
  "title": "string",
  "description": "string",
  "targetKeywords": ["string"],
  "contentPillars": ["string"],
  "recommendations": "string"
}

""" + JSON_ONLY

STRATEGY_TEMPLATE = """Create a content strategy for:
Company: {description}
Target Audience: {target_audience}
Industry: {industry}

Provide strategic recommendations for content marketing including key pillars, target keywords, and actionable recommendations."""


# =============================================================================
# BUILDERS
# =============================================================================

def to_json_block(data: Any) -> str:
    return json.dumps(data, indent=2, default=str, ensure_ascii=False)


def company_block(company: Optional[Dict[str, Any]]) -> str:
    """Short company section for prompts that only need a summary."""
    if not company:
        return ""
    products = ", ".join(company.get("products") or []) or "Not specified"
    return (
        "\n## Company Context\n"
        f"- Company: {company.get('name')}\n"
        f"- Industry: {company.get('industry') or 'Not specified'}\n"
        f"- Products/Services: {products}\n"
        f"- Target Audience: {company.get('ideal_customer_profiles') or 'Not specified'}\n"
        f"- Unique Selling Proposition: {company.get('unique_selling_proposition') or 'Not specified'}\n"
        f"- Website: {company.get('website') or 'Not specified'}\n"
    )


def rejected_block(rejected: List[Dict[str, Any]]) -> str:
    if not rejected:
        return "None"
    lines = []
    for item in rejected:
        line = f"- {item.get('title') or 'Untitled'}"
        if item.get("reason"):
            line += f" (rejected because: {item['reason']})"
        lines.append(line)
    return "\n".join(lines)
