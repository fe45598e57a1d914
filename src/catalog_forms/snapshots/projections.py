"""Comparison projections for the catalog edit screens.

Only the shape matters here: which fields are free text, which hold editor
markup, which are unordered tag lists and which are ordered sub-entity
collections. Read-only metadata (ids, timestamps) is not declared.
"""

from __future__ import annotations

from .projection import FieldKind, Projection

S = FieldKind.STRING
RT = FieldKind.RICH_TEXT
TAGS = FieldKind.STRING_LIST
FLAG = FieldKind.BOOLEAN

BLOG_SUBSECTION_PROJECTION = Projection.of(
    title=S,
    description=RT,
    image=S,
)

BLOG_PROJECTION = Projection.of(
    title=S,
    description=S,
    content=RT,
    quote=S,
    excerpt=S,
    category=S,
    tags=TAGS,
    visibility=S,
    publishDate=S,
    publishTime=S,
    metaTitle=S,
    metaDescription=S,
    metaURL=S,
    slug=S,
    author=S,
    adminComment=S,
    featured=FLAG,
    sticky=FLAG,
    allowComments=FLAG,
    mainImagePC=S,
    mainImageMobile=S,
    subsections=BLOG_SUBSECTION_PROJECTION,
)

PRODUCT_VARIANT_PROJECTION = Projection.of(
    optionName=S,
    optionValue=S,
    image=S,
    sku=S,
    barcode=S,
    costPrice=S,
    sellingPrice=S,
    compareAtPrice=S,
    inventoryQuantity=S,
    enabled=FLAG,
)

PRODUCT_FAQ_PROJECTION = Projection.of(
    question=S,
    answer=S,
)

PRODUCT_PROJECTION = Projection.of(
    productTitle=S,
    secondaryTitle=S,
    shortDescription=RT,
    fullDescription=RT,
    costPrice=S,
    sellingPrice=S,
    compareAtPrice=S,
    sku=S,
    hsnNumber=S,
    barcode=S,
    inventoryQuantity=S,
    weight=S,
    length=S,
    breadth=S,
    height=S,
    tier1Category=S,
    tier2Category=S,
    tier3Category=S,
    tier4Category=S,
    productStatus=S,
    featured=FLAG,
    scheduleDate=S,
    scheduleTime=S,
    preorderEnabled=FLAG,
    preorderDate=S,
    limitedEdition=FLAG,
    delistProduct=FLAG,
    delistDate=S,
    giftWrapAvailable=FLAG,
    salesChannels=TAGS,
    adminComment=S,
    primaryImage=S,
    additionalImages=FieldKind.PASSTHROUGH,
    productUrl=S,
    metaTitle=S,
    metaDescription=S,
    tags=TAGS,
    slug=S,
    faqs=PRODUCT_FAQ_PROJECTION,
    productVariants=PRODUCT_VARIANT_PROJECTION,
)

COLLECTION_CONDITION_PROJECTION = Projection.of(
    field=S,
    operator=S,
    value=S,
)

COLLECTION_PROJECTION = Projection.of(
    title=S,
    description=RT,
    bannerImage=S,
    bannerImageMobile=S,
    collectionType=S,
    conditionMatchType=S,
    conditions=COLLECTION_CONDITION_PROJECTION,
    sortOrder=S,
    status=S,
    publishDate=S,
    publishTime=S,
    tags=TAGS,
    urlHandle=S,
    metaTitle=S,
    metaDescription=S,
    adminComment=S,
)

__all__ = [
    "BLOG_PROJECTION",
    "BLOG_SUBSECTION_PROJECTION",
    "COLLECTION_CONDITION_PROJECTION",
    "COLLECTION_PROJECTION",
    "PRODUCT_FAQ_PROJECTION",
    "PRODUCT_PROJECTION",
    "PRODUCT_VARIANT_PROJECTION",
]
