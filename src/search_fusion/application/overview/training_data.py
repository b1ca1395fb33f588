"""
Labeled corpus for the query intent classifier.

Four intents:
- information: explanations, how-tos, concepts (may trigger an AI overview)
- navigation: going to a site or app
- realtime: prices, weather, scores, dated figures
- commercial: buying, booking, product recommendations

Short queries at the end keep one-word inputs from being misread.
"""

from __future__ import annotations

INTENTS = ("information", "navigation", "realtime", "commercial")

TRAINING_SAMPLES: tuple[tuple[str, str], ...] = (
    # Information
    ("如何用Python实现机器学习算法", "information"),
    ("什么是量子计算", "information"),
    ("解释一下云计算的三种服务模型", "information"),
    ("人工智能的未来发展方向", "information"),
    ("机器学习中随机森林的参数调优方法", "information"),
    ("JavaScript异步编程方法有哪些", "information"),
    ("核聚变是什么原理", "information"),
    ("地球为什么是圆的", "information"),
    ("什么是黑洞", "information"),
    ("二战爆发的原因和影响", "information"),
    ("如何在家制作美味的披萨", "information"),
    ("介绍一下长城", "information"),
    ("什么是区块链技术", "information"),
    ("深度学习和机器学习的区别", "information"),
    ("who is the current president of France", "information"),
    ("explain the process of photosynthesis", "information"),
    ("what is the capital of Australia", "information"),
    ("how does a quantum computer work", "information"),
    # Navigation
    ("Python官网登录", "navigation"),
    ("TensorFlow官网下载", "navigation"),
    ("打开我的邮箱", "navigation"),
    ("访问谷歌", "navigation"),
    ("微软官方网站", "navigation"),
    ("go to youtube", "navigation"),
    ("open facebook site", "navigation"),
    # Realtime
    ("2025年Python开发者薪资", "realtime"),
    ("现在的比特币价格是多少", "realtime"),
    ("今天的天气怎么样", "realtime"),
    ("2023年全球GDP排名", "realtime"),
    ("当前时间", "realtime"),
    ("last night's football scores", "realtime"),
    ("stock prices now", "realtime"),
    # Commercial
    ("购买Python编程书籍", "commercial"),
    ("最好的个人电脑推荐", "commercial"),
    ("哪里可以买到iPhone 15", "commercial"),
    ("预订机票", "commercial"),
    ("price of new samsung phone", "commercial"),
    ("cheapest flights to london", "commercial"),
    # Short queries
    ("Python", "information"),
    ("机器学习", "information"),
    ("最新消息", "realtime"),
    ("去淘宝", "navigation"),
    ("how to", "information"),
    ("what is", "information"),
)
